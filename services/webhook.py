# services/webhook.py

import json
import logging

from aiohttp import web
from telegram import Bot, Update

from config import WEBHOOK_PATH
from services.poller import UpdatePoller

logger = logging.getLogger(__name__)

POLLER_KEY = web.AppKey("poller", UpdatePoller)
BOT_KEY = web.AppKey("bot", Bot)


async def index(request: web.Request) -> web.Response:
    return web.Response(text="Book search bot is running")


async def telegram_webhook(request: web.Request) -> web.Response:
    """
    Принимает update от Telegram и отдаёт его той же изолированной обработке,
    что и цикл опроса. Ошибка обработки не превращается в 5xx, иначе Telegram
    будет повторять доставку.
    """
    try:
        data = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Webhook: тело запроса не JSON")
        raise web.HTTPBadRequest(text="invalid json")

    if not isinstance(data, dict) or "update_id" not in data:
        logger.warning("Webhook: нет update_id в теле запроса")
        raise web.HTTPBadRequest(text="invalid update")

    try:
        update = Update.de_json(data, request.app[BOT_KEY])
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Webhook: не удалось разобрать update: %s", e)
        raise web.HTTPBadRequest(text="invalid update")

    await request.app[POLLER_KEY].dispatch(update)
    return web.Response(text="ok")


def create_app(bot: Bot, poller: UpdatePoller) -> web.Application:
    app = web.Application()
    app[BOT_KEY] = bot
    app[POLLER_KEY] = poller
    app.router.add_get("/", index)
    app.router.add_post(WEBHOOK_PATH, telegram_webhook)
    return app

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.responses import PlainTextResponse
from telegram import Update

from ..bot import messaging
from ..bot.application import start_bot, stop_bot
from ..config import constants
from ..context import BotContext

logger = logging.getLogger(__name__)


def create_app(ctx: BotContext, manage_bot: bool = True) -> FastAPI:
    """
    Builds the HTTP app Telegram pushes updates to.
    With `manage_bot`, the lifespan starts the bot and registers the webhook.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if manage_bot:
            await start_bot(ctx)
        yield
        if manage_bot:
            await stop_bot(ctx)

    app = FastAPI(title="cftracker", lifespan=lifespan)

    @app.post(constants.WEBHOOK_PATH_PREFIX + "/{token}")
    async def telegram_webhook(token: str, request: Request) -> Response:
        if token != ctx.settings.bot_token:
            raise HTTPException(status_code=404)

        try:
            data = await request.json()
            update = Update.de_json(data, ctx.application.bot)
            await ctx.application.process_update(update)
        except Exception as e:
            logger.error(f"Error processing update: {e}", exc_info=True)
            return Response(status_code=500)
        return Response(status_code=200)

    @app.get("/", response_class=PlainTextResponse)
    async def root() -> str:
        """Liveness check for the hosting platform."""
        return messaging.ALIVE_MESSAGE

    return app

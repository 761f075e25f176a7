import logging

from telegram.ext import Application

from ..context import BotContext
from .handlers import register_handlers

logger = logging.getLogger(__name__)


def build_application(ctx: BotContext) -> Application:
    """Builds the python-telegram-bot Application. Updates arrive via our webhook, so no Updater."""
    application = (
        Application.builder()
        .token(ctx.settings.bot_token)
        .updater(None)
        .build()
    )
    register_handlers(application, ctx)
    ctx.application = application
    return application


async def start_bot(ctx: BotContext):
    """
    Startup sequence: database, Telegram session, bot username, webhook.
    The username must be resolved before the webhook is registered, since
    group messages are only handled when they mention it.
    """
    application = ctx.application
    if application is None:
        raise RuntimeError("build_application() must be called before start_bot().")

    ctx.store.init_db()
    await application.initialize()

    try:
        me = await application.bot.get_me()
        if me and me.username:
            ctx.bot_username = f"@{me.username}"
            logger.info(f"Bot username: {ctx.bot_username}")
    except Exception as e:
        logger.warning(f"Could not get bot username, using {ctx.bot_username}: {e}")

    await application.start()

    logger.info(f"Registering webhook at {ctx.settings.webhook_url} ...")
    try:
        await application.bot.set_webhook(
            ctx.settings.webhook_url,
            drop_pending_updates=ctx.settings.drop_pending_updates,
        )
        logger.info("Webhook registered with Telegram.")
    except Exception as e:
        logger.error(f"Failed to set webhook: {e}")


async def stop_bot(ctx: BotContext):
    application = ctx.application
    if application is not None:
        await application.stop()
        await application.shutdown()
    await ctx.judge.aclose()
    ctx.store.dispose()
    logger.info("Bot stopped.")

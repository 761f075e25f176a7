from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from telegram.ext import Application, MessageHandler

from cftracker.bot.application import build_application, start_bot, stop_bot
from cftracker.config import constants


def fake_application(username="CpTrackBuddyTestBot"):
    bot = SimpleNamespace(
        get_me=AsyncMock(return_value=SimpleNamespace(username=username)),
        set_webhook=AsyncMock(),
    )
    return SimpleNamespace(
        bot=bot,
        initialize=AsyncMock(),
        start=AsyncMock(),
        stop=AsyncMock(),
        shutdown=AsyncMock(),
    )


@pytest.fixture
def bot_ctx(ctx):
    ctx.bot_username = constants.DEFAULT_BOT_USERNAME
    ctx.store = MagicMock()
    ctx.application = fake_application()
    return ctx


def test_build_application_registers_message_handler(ctx):
    application = build_application(ctx)

    assert isinstance(application, Application)
    assert ctx.application is application
    handlers = [h for group in application.handlers.values() for h in group]
    assert any(isinstance(h, MessageHandler) for h in handlers)
    assert application.error_handlers
    assert application.updater is None


async def test_start_bot_resolves_username_then_registers_webhook(bot_ctx):
    await start_bot(bot_ctx)

    bot_ctx.store.init_db.assert_called_once()
    bot_ctx.application.initialize.assert_awaited_once()
    bot_ctx.application.start.assert_awaited_once()
    assert bot_ctx.bot_username == "@CpTrackBuddyTestBot"
    bot_ctx.application.bot.set_webhook.assert_awaited_once_with(
        bot_ctx.settings.webhook_url, drop_pending_updates=True
    )


async def test_start_bot_keeps_fallback_username_when_get_me_fails(bot_ctx):
    bot_ctx.application.bot.get_me.side_effect = RuntimeError("network down")

    await start_bot(bot_ctx)

    assert bot_ctx.bot_username == constants.DEFAULT_BOT_USERNAME
    bot_ctx.application.bot.set_webhook.assert_awaited_once()


async def test_start_bot_survives_webhook_registration_failure(bot_ctx):
    bot_ctx.application.bot.set_webhook.side_effect = RuntimeError("bad url")

    await start_bot(bot_ctx)

    bot_ctx.application.start.assert_awaited_once()


async def test_start_bot_requires_built_application(bot_ctx):
    bot_ctx.application = None

    with pytest.raises(RuntimeError):
        await start_bot(bot_ctx)


async def test_stop_bot_releases_everything(bot_ctx):
    await stop_bot(bot_ctx)

    bot_ctx.application.stop.assert_awaited_once()
    bot_ctx.application.shutdown.assert_awaited_once()
    bot_ctx.judge.aclose.assert_awaited_once()
    bot_ctx.store.dispose.assert_called_once()

from dataclasses import dataclass
from typing import Optional

from telegram.ext import Application

from .config import constants
from .config.settings import Settings
from .data.database import GroupStore
from .integrations.codeforces import CodeforcesClient


@dataclass
class BotContext:
    """
    Everything the update handlers and the webhook endpoint share.

    Initialization order:
    1. `settings`, `store` and `judge` are ready when the context is constructed.
    2. `build_application()` sets `application` and registers the handlers.
    3. `start_bot()` replaces `bot_username` with the name reported by getMe,
       then registers the webhook. Updates only arrive after that, so handlers
       never see the fallback token unless getMe failed.
    """
    settings: Settings
    store: GroupStore
    judge: CodeforcesClient
    application: Optional[Application] = None
    bot_username: str = constants.DEFAULT_BOT_USERNAME

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from cftracker.config.settings import Settings
from cftracker.context import BotContext
from cftracker.data.database import GroupStore
from cftracker.integrations.codeforces import InvalidHandleOrUpstream

BOT_TOKEN = "123456:TEST-TOKEN"


class FakeJudge:
    """Stands in for CodeforcesClient: counts per handle, or an exception to raise."""

    def __init__(self, results=None):
        self.results = results or {}
        self.calls = []
        self.aclose = AsyncMock()

    async def get_today_solved_count(self, handle, now=None):
        self.calls.append(handle)
        result = self.results.get(handle, 0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def settings():
    return Settings(
        bot_token=BOT_TOKEN,
        database_url="sqlite://",
        webhook_url=f"https://example.com/webhook/{BOT_TOKEN}",
    )


@pytest.fixture
def store(tmp_path):
    store = GroupStore(f"sqlite:///{tmp_path / 'groups.db'}")
    store.init_db()
    yield store
    store.dispose()


@pytest.fixture
def judge():
    return FakeJudge()


@pytest.fixture
def ctx(settings, store, judge):
    return BotContext(settings=settings, store=store, judge=judge, bot_username="@TrackBot")


@pytest.fixture
def tg_context():
    """Minimal stand-in for telegram.ext.CallbackContext: only bot.send_message is used."""
    return SimpleNamespace(bot=SimpleNamespace(send_message=AsyncMock()))


def make_update(text, chat_id=-100500, chat_type="group", title="CP Club"):
    chat = SimpleNamespace(id=chat_id, type=chat_type, title=title)
    message = SimpleNamespace(text=text, chat=chat)
    return SimpleNamespace(effective_chat=chat, effective_message=message)


def sent_texts(tg_context):
    return [call.args[1] for call in tg_context.bot.send_message.await_args_list]


def judge_failure(handle):
    return InvalidHandleOrUpstream(handle, "handle: User with handle %s not found" % handle)

import logging
import re

from telegram import Update
from telegram.constants import ChatType, ParseMode
from telegram.ext import Application, ContextTypes, MessageHandler, filters

from ..config import constants
from ..context import BotContext
from ..data.database import AddResult, StoreUnavailable
from ..integrations.codeforces import InvalidHandleOrUpstream
from . import messaging

logger = logging.getLogger(__name__)


def is_addressed_to_bot(chat_type: str, text: str, bot_username: str) -> bool:
    """Private chats always reach the bot; in groups the message must mention it."""
    return chat_type == ChatType.PRIVATE or bot_username in text


def strip_mention(text: str, bot_username: str) -> str:
    """Removes every mention of the bot, ignoring case, and trims the rest."""
    return re.sub(re.escape(bot_username), "", text, flags=re.IGNORECASE).strip()


def parse_add_argument(cleaned_text: str):
    """Returns the handle given to /add, or None if there is none."""
    parts = cleaned_text.split()
    return parts[1] if len(parts) > 1 else None


class TrackerHandlers:
    """Telegram callbacks for the tracker. Holds the shared BotContext instead of module globals."""

    def __init__(self, ctx: BotContext):
        self.ctx = ctx

    async def on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE):
        """Entry point for every new message: gate, then /add or the daily report."""
        chat = update.effective_chat
        message = update.effective_message
        if chat is None or message is None:
            return
        text = message.text or ""

        if not is_addressed_to_bot(chat.type, text, self.ctx.bot_username):
            return

        cleaned_text = strip_mention(text, self.ctx.bot_username)

        if cleaned_text.startswith(constants.ADD_COMMAND):
            await self.add_handle(chat, cleaned_text, context)
            return

        await self.report_today(chat, context)
        logger.info(f"User said: {chat.id} {cleaned_text}")

    async def add_handle(self, chat, cleaned_text: str, context: ContextTypes.DEFAULT_TYPE):
        """Handles `/add <handle>`."""
        handle = parse_add_argument(cleaned_text)
        if not handle:
            await context.bot.send_message(chat.id, messaging.ADD_USAGE_MESSAGE, parse_mode=ParseMode.MARKDOWN)
            return

        try:
            result = self.ctx.store.add_handle(chat.id, chat.title, handle)
        except StoreUnavailable as e:
            logger.error(f"Error adding {handle} to group {chat.id}: {e}", exc_info=True)
            await context.bot.send_message(chat.id, messaging.ADD_FAILED_MESSAGE)
            return

        if result is AddResult.CREATED:
            reply = messaging.format_group_created_message(handle)
        elif result is AddResult.ALREADY_TRACKED:
            reply = messaging.format_already_tracked_message(handle)
        else:
            reply = messaging.format_handle_added_message(handle)
        await context.bot.send_message(chat.id, reply)

    async def report_today(self, chat, context: ContextTypes.DEFAULT_TYPE):
        """Sends one message per tracked handle with today's solved count, in tracking order."""
        try:
            group = self.ctx.store.find_by_group(chat.id)
        except StoreUnavailable as e:
            logger.error(f"Error loading tracked handles for group {chat.id}: {e}", exc_info=True)
            await context.bot.send_message(chat.id, messaging.REPORT_FAILED_MESSAGE)
            return

        if group is None or not group.users:
            await context.bot.send_message(chat.id, messaging.NO_USERS_MESSAGE)
            return

        for user in group.users:
            try:
                solved = await self.ctx.judge.get_today_solved_count(user.handle)
            except InvalidHandleOrUpstream as e:
                logger.error(f"Error fetching for {user.handle} in group {chat.id}: {e.reason}")
                await context.bot.send_message(chat.id, messaging.format_fetch_failed_message(user.handle))
                continue
            await context.bot.send_message(chat.id, messaging.format_solved_today_message(user.handle, solved))


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Logs errors that escaped a handler, with the update that caused them."""
    logger.error(f"Exception while handling an update: {update}", exc_info=context.error)


def register_handlers(app: Application, ctx: BotContext) -> TrackerHandlers:
    """Registers the message handler and the error handler."""
    handlers = TrackerHandlers(ctx)
    app.add_handler(MessageHandler(filters.UpdateType.MESSAGE, handlers.on_message))
    app.add_error_handler(error_handler)
    return handlers

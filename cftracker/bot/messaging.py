from ..config import constants

ADD_USAGE_MESSAGE = (
    f"❌ Please provide a Codeforces handle. Example: `{constants.ADD_COMMAND} tourist`"
)
ADD_FAILED_MESSAGE = "❌ Something went wrong while adding the handle."
NO_USERS_MESSAGE = (
    f"No users are being tracked in this group. Use {constants.ADD_COMMAND} <handle> to add someone."
)
REPORT_FAILED_MESSAGE = "❌ Could not fetch Codeforces data. Make sure the handles are correct."
ALIVE_MESSAGE = "🤖 Telegram bot is alive!"


def format_group_created_message(handle: str) -> str:
    return f"✅ Added {handle} and created new tracking for this group."


def format_handle_added_message(handle: str) -> str:
    return f"✅ Added {handle} to tracking list."


def format_already_tracked_message(handle: str) -> str:
    return f"⚠️ {handle} is already being tracked."


def format_solved_today_message(handle: str, count: int) -> str:
    return f"📝 {handle} solved {count} problems today."


def format_fetch_failed_message(handle: str) -> str:
    return f"❌ Could not fetch data for {handle}."

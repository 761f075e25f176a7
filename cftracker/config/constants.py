# API URLs
CODEFORCES_API_URL = "https://codeforces.com/api"

# Codeforces
ACCEPTED_VERDICT = "OK"
HTTP_TIMEOUT_SECONDS = 30.0

# Telegram
# Used as the mention token until getMe resolves the real one.
DEFAULT_BOT_USERNAME = "@CpTrackBuddybot"
WEBHOOK_PATH_PREFIX = "/webhook"
ADD_COMMAND = "/add"

# Server
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 10000

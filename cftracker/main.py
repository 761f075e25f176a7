import logging
import sys

import uvicorn

from .config.settings import ConfigurationError, load_settings
from .context import BotContext
from .data.database import GroupStore
from .integrations.codeforces import CodeforcesClient
from .bot.application import build_application
from .web.app import create_app

logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


def main() -> None:
    """Sets up and runs the bot behind its webhook server."""
    # --- Configuration ---
    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.critical(f"CRITICAL: {e}")
        sys.exit(1)
    logging.getLogger().setLevel(settings.log_level)

    # --- Shared context ---
    ctx = BotContext(
        settings=settings,
        store=GroupStore(settings.database_url),
        judge=CodeforcesClient(timezone=settings.timezone),
    )

    # --- Bot and HTTP app ---
    build_application(ctx)
    app = create_app(ctx)

    logger.info(f"Bot server running on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()

"""Webhook launcher; serves on ``$PORT`` (default 8080).

- POST /webhook/telegram  - Telegram bot updates
- GET  /health            - startup state plus a live ping of the selected storage
"""

import logging
import os

from dotenv import load_dotenv

from harajat_bot.logging_config import configure_logging
from harajat_bot.webhook import BotRuntime, create_app

load_dotenv()
configure_logging()
logger = logging.getLogger(__name__)

runtime = BotRuntime()
app = create_app(runtime, webhook_secret=os.getenv("WEBHOOK_SECRET", ""))


if __name__ == "__main__":
    port = int(os.getenv("PORT", 8080))
    logger.info("Starting webhook server on port %s", port)
    runtime.start()
    app.run(host="0.0.0.0", port=port)

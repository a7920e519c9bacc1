"""Long-polling launcher for Harajat Bot."""

import logging

from dotenv import load_dotenv

from harajat_bot.bot import ExpenseBot
from harajat_bot.config import BotConfig
from harajat_bot.database import create_storage
from harajat_bot.logging_config import configure_logging

logger = logging.getLogger(__name__)


def main() -> None:
    load_dotenv()
    configure_logging()

    config = BotConfig.from_env()
    storage = create_storage(config)
    bot = ExpenseBot(config, storage)
    bot.run()


if __name__ == '__main__':
    main()

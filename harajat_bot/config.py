"""Bot configuration dataclass."""

import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from . import constants


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.lower() in ("true", "1", "yes")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


@dataclass
class BotConfig:
    token: str
    category_examples: Dict[str, str] = field(default_factory=lambda: dict(constants.CATEGORY_EXAMPLES))
    max_amount: int = constants.MAX_AMOUNT
    description_max_length: int = constants.DESCRIPTION_MAX_LENGTH
    expenses_per_page: int = constants.EXPENSES_PER_PAGE
    report_per_page: int = constants.REPORT_PER_PAGE
    currency: str = constants.CURRENCY
    use_firestore: bool = True
    firestore_project: Optional[str] = None
    firestore_collection: str = "expenses"
    sqlite_path: str = "expenses.db"

    @property
    def categories(self) -> List[str]:
        return list(self.category_examples)

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Build a config from environment variables (``.env`` is loaded by the launchers)."""
        token = os.getenv("TELEGRAM_BOT_TOKEN")
        if not token:
            raise ValueError(
                "❌ TELEGRAM_BOT_TOKEN not set.\nGet it from @BotFather and export TELEGRAM_BOT_TOKEN='your-token'",
            )
        return cls(
            token=token,
            max_amount=_env_int("MAX_AMOUNT", constants.MAX_AMOUNT),
            description_max_length=_env_int("DESCRIPTION_MAX_LENGTH", constants.DESCRIPTION_MAX_LENGTH),
            expenses_per_page=_env_int("EXPENSES_PER_PAGE", constants.EXPENSES_PER_PAGE),
            report_per_page=_env_int("REPORT_PER_PAGE", constants.REPORT_PER_PAGE),
            currency=os.getenv("CURRENCY", constants.CURRENCY),
            use_firestore=_env_flag("USE_FIRESTORE", True),
            firestore_project=os.getenv("FIRESTORE_PROJECT") or None,
            firestore_collection=os.getenv("FIRESTORE_COLLECTION", "expenses"),
            sqlite_path=os.getenv("SQLITE_PATH", "expenses.db"),
        )


__all__ = ["BotConfig"]

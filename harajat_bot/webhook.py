"""Flask front end that feeds Telegram webhook updates into an ExpenseBot.

The bot lives on a private asyncio loop in a daemon thread. Flask request
threads hand coroutines to that loop and block until they finish, so the
WSGI server never needs to be async itself.
"""

import asyncio
import hmac
import logging
import threading
from typing import Callable, Optional, Tuple

from flask import Flask, jsonify, request
from telegram import Update

from .bot import ExpenseBot
from .config import BotConfig
from .database import StorageSelection, select_storage
from .errors import StorageError

logger = logging.getLogger(__name__)

SECRET_HEADER = "X-Telegram-Bot-Api-Secret-Token"

BotFactory = Callable[[], Tuple[ExpenseBot, StorageSelection]]


def build_bot() -> Tuple[ExpenseBot, StorageSelection]:
    config = BotConfig.from_env()
    selection = select_storage(config)
    return ExpenseBot(config, selection.storage), selection


class BotRuntime:
    """Starts the bot once in the background and runs its coroutines."""

    def __init__(self, factory: BotFactory = build_bot, ready_timeout: float = 30.0):
        self._factory = factory
        self.ready_timeout = ready_timeout
        self._loop = asyncio.new_event_loop()
        self._loop_thread = threading.Thread(target=self._loop.run_forever, name="bot-loop", daemon=True)
        self._lock = threading.Lock()
        self._started = False
        self._ready = threading.Event()
        self._settled = threading.Event()
        self.bot: Optional[ExpenseBot] = None
        self.selection: Optional[StorageSelection] = None
        self.error: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self._ready.is_set()

    def run(self, coro, timeout: float = 60.0):
        """Run *coro* on the bot loop and wait for its result."""
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result(timeout=timeout)

    def start(self) -> None:
        with self._lock:
            if self._started:
                return
            self._started = True
        self._loop_thread.start()
        threading.Thread(target=self._initialise, name="bot-init", daemon=True).start()

    def stop(self) -> None:
        if self._loop_thread.is_alive():
            self._loop.call_soon_threadsafe(self._loop.stop)

    def _initialise(self) -> None:
        try:
            bot, selection = self._factory()
            bot.setup()
            # initialize() contacts the Telegram API to validate the token
            self.run(bot.application.initialize())
            self.run(bot.application.start())
        except Exception as exc:  # noqa: BLE001 - surfaced through /health
            self.error = f"{type(exc).__name__}: {exc}"
            logger.exception("Telegram bot initialisation failed")
        else:
            self.bot, self.selection = bot, selection
            self._ready.set()
            logger.info("Telegram bot ready on %s storage (%s)", selection.storage.name, selection.reason)
        finally:
            self._settled.set()

    def wait_ready(self, timeout: Optional[float] = None) -> bool:
        """Block until startup succeeded or failed; True only on success."""
        self._settled.wait(timeout=self.ready_timeout if timeout is None else timeout)
        return self.ready

    def process(self, payload: dict) -> None:
        update = Update.de_json(payload, self.bot.application.bot)
        self.run(self.bot.application.process_update(update))

    def storage_status(self) -> dict:
        """Ping the backend picked at startup. No fail-over happens here."""
        storage = self.selection.storage
        status = {
            "storage": storage.name,
            "selected_because": self.selection.reason,
            "fallback": self.selection.is_fallback,
        }
        try:
            storage.ping()
        except StorageError as exc:
            logger.error("Health ping of %s storage failed: %s", storage.name, exc)
            status["reachable"] = False
            status["detail"] = str(exc)
        else:
            status["reachable"] = True
        return status


def _secret_matches(received: str, expected: str) -> bool:
    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))


def create_app(runtime: BotRuntime, webhook_secret: str = "") -> Flask:
    app = Flask(__name__)

    @app.route("/webhook/telegram", methods=["POST"])
    def telegram_webhook():
        if webhook_secret and not _secret_matches(request.headers.get(SECRET_HEADER, ""), webhook_secret):
            logger.warning("Rejected webhook call with a wrong secret token")
            return jsonify({"error": "unauthorized"}), 401
        runtime.start()
        if not runtime.wait_ready():
            return jsonify({"error": "Bot failed to start" if runtime.error else "Bot not ready"}), 503
        runtime.process(request.get_json(force=True, silent=True) or {})
        return "ok", 200

    @app.route("/health", methods=["GET"])
    def health():
        if runtime.error:
            return jsonify({"status": "error", "detail": runtime.error}), 500
        if not runtime.ready:
            return jsonify({"status": "starting"}), 200
        body = runtime.storage_status()
        if not body["reachable"]:
            body["status"] = "degraded"
            return jsonify(body), 503
        body["status"] = "ready"
        return jsonify(body), 200

    return app


__all__ = ["BotRuntime", "build_bot", "create_app"]

"""Telegram dialogue controller: commands, menu labels, inline buttons."""

import asyncio
import logging
from datetime import date, timedelta
from typing import Callable, Optional

from telegram import InlineKeyboardMarkup, InputFile, Update
from telegram.error import BadRequest, TelegramError
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    ContextTypes,
    MessageHandler,
    filters,
)

from .. import constants
from ..config import BotConfig
from ..database import ExpenseStorage
from ..errors import NotFoundError, StorageError, ValidationError
from ..report import ReportAggregator, daily_totals, paginate
from ..state import ConversationState, InMemoryStateStore, StateStore, Step
from .actions import (
    CancelDeleteAction,
    ChartAction,
    DeleteAction,
    ListAction,
    MenuAction,
    ReportAction,
    ReportKind,
    decode_action,
)
from .formatting import (
    HELP_TEXT,
    WELCOME_TEXT,
    render_delete_prompt,
    render_examples,
    render_listing,
    render_report,
    render_saved,
    report_title,
)
from .keyboards import KeyboardFactory
from .parsers import parse_amount, parse_month, validate_description
from .visualization import VisualizationService

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "❌ Something went wrong while talking to the database. Please try again later."


class ExpenseBot:
    """Object-oriented Telegram bot for recording expenses and reading reports."""

    def __init__(
        self,
        config: BotConfig,
        storage: ExpenseStorage,
        state_store: Optional[StateStore] = None,
        viz: Optional[VisualizationService] = None,
        today: Callable[[], date] = date.today,
    ):
        self.config = config
        self.storage = storage
        self.states = state_store if state_store is not None else InMemoryStateStore()
        self.viz = viz or VisualizationService(config.currency)
        self.keyboards = KeyboardFactory(config.categories)
        self.aggregator = ReportAggregator(config.report_per_page)
        self._today = today
        self._handlers_registered = False
        self.application = Application.builder().token(config.token).concurrent_updates(True).build()

        self._menu_handlers = {
            constants.BTN_ADD: self._start_entry,
            constants.BTN_DELETE_LAST: self.delete_last,
            constants.BTN_WEEK: self.week,
            constants.BTN_MONTH: self.month,
            constants.BTN_TODAY: self.today,
            constants.BTN_ALL: self.all_expenses,
            constants.BTN_SETTINGS: self.settings,
            constants.BTN_HELP: self.help,
        }
        for label in constants.LEGACY_DELETE_LABELS:
            self._menu_handlers[label] = self.delete_last

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def setup(self) -> None:
        if self._handlers_registered:
            return
        app = self.application
        app.add_handler(CommandHandler("start", self.start))
        app.add_handler(CommandHandler("help", self.help))
        app.add_handler(CommandHandler("add", self.add))
        app.add_handler(CommandHandler("cancel", self.cancel))
        app.add_handler(CommandHandler("today", self.today))
        app.add_handler(CommandHandler("monthly", self.monthly))
        app.add_handler(CommandHandler("delete_last", self.delete_last))
        app.add_handler(CommandHandler("all_expenses", self.all_expenses))

        app.add_handler(CallbackQueryHandler(self.button_callback))
        app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND & filters.UpdateType.MESSAGE, self.handle_text))
        app.add_error_handler(self.error_handler)
        self._handlers_registered = True

    def run(self) -> None:
        self.setup()
        logger.info("🚀 Starting bot with %s storage...", self.storage.name)
        self.application.run_polling(allowed_updates=Update.ALL_TYPES)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _call(self, method, *args):
        """Run a blocking storage call without stalling other chats."""
        return await asyncio.to_thread(method, *args)

    async def _send(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, text: str, reply_markup=None) -> None:
        await context.bot.send_message(
            chat_id=chat_id,
            text=text,
            reply_markup=reply_markup if reply_markup is not None else self.keyboards.main_menu(),
        )

    async def _fail(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, text: str = GENERIC_FAILURE) -> None:
        await self._send(context, chat_id, text)

    async def _edit_or_send(self, query, context: ContextTypes.DEFAULT_TYPE, text: str,
                            reply_markup: Optional[InlineKeyboardMarkup] = None) -> None:
        try:
            await query.edit_message_text(text, reply_markup=reply_markup)
        except BadRequest as exc:
            if "not modified" in str(exc).lower():
                logger.debug("message already shows this page")
                return
            logger.debug("edit_message_text fallback: %s", exc)
            await context.bot.send_message(chat_id=query.message.chat_id, text=text, reply_markup=reply_markup)

    async def _deliver(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, text: str,
                       inline_markup: Optional[InlineKeyboardMarkup], query=None) -> None:
        """Edit the tapped message for paging callbacks, otherwise send a new one."""
        if query is not None:
            await self._edit_or_send(query, context, text, reply_markup=inline_markup)
        else:
            await self._send(context, chat_id, text, reply_markup=inline_markup)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def start(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        chat_id = update.effective_chat.id
        self.states.clear(chat_id)
        await update.message.reply_text(WELCOME_TEXT, reply_markup=self.keyboards.main_menu())

    async def help(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_text(HELP_TEXT, reply_markup=self.keyboards.main_menu())

    async def add(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._start_entry(update, context)

    async def cancel(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        chat_id = update.effective_chat.id
        state = self.states.get(chat_id)
        if state is None or not state.in_flow:
            await update.message.reply_text("Nothing to cancel.", reply_markup=self.keyboards.main_menu())
            return
        self.states.clear(chat_id)
        await update.message.reply_text("❌ Adding the expense was cancelled.", reply_markup=self.keyboards.main_menu())

    async def today(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._send_report(context, update.effective_chat.id, ReportKind.TODAY, self._today())

    async def week(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        start = self._today() - timedelta(days=7)
        await self._send_report(context, update.effective_chat.id, ReportKind.WEEK, start)

    async def month(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        start = self._today() - timedelta(days=30)
        await self._send_report(context, update.effective_chat.id, ReportKind.MONTH, start)

    async def monthly(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        chat_id = update.effective_chat.id
        arg = " ".join(context.args or [])
        try:
            start, end = parse_month(arg)
        except ValidationError as exc:
            await update.message.reply_text(f"❌ {exc}", reply_markup=self.keyboards.main_menu())
            return
        await self._send_report(context, chat_id, ReportKind.MONTHLY, start, end)

    async def all_expenses(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await self._send_listing(context, update.effective_chat.id, page=0)

    async def settings(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        await update.message.reply_text(
            "⚙️ Settings:\n\nChoose one of the options below:",
            reply_markup=self.keyboards.settings_keyboard(),
        )

    async def delete_last(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        chat_id = update.effective_chat.id
        try:
            expense = await self._call(self.storage.get_last_expense, chat_id)
        except StorageError as exc:
            logger.error("Fetching last expense for %s failed: %s", chat_id, exc)
            await self._fail(context, chat_id)
            return

        if expense is None:
            await self._send(context, chat_id, "❌ No expense found to delete")
            return

        await self._send(
            context,
            chat_id,
            render_delete_prompt(expense, self.config.currency),
            reply_markup=self.keyboards.confirm_delete_keyboard(expense.id, chat_id),
        )

    # ------------------------------------------------------------------
    # Add-expense flow
    # ------------------------------------------------------------------

    async def _start_entry(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        chat_id = update.effective_chat.id
        self.states.set(chat_id, ConversationState(step=Step.AWAITING_CATEGORY))
        await update.message.reply_text("Choose a category:", reply_markup=self.keyboards.categories_keyboard())

    async def _continue_entry(self, update: Update, context: ContextTypes.DEFAULT_TYPE,
                              state: ConversationState, text: str) -> None:
        chat_id = update.effective_chat.id
        message = update.message

        if text == constants.BTN_CANCEL:
            self.states.clear(chat_id)
            await message.reply_text("❌ Adding the expense was cancelled.", reply_markup=self.keyboards.main_menu())
            return

        if state.step is Step.AWAITING_CATEGORY:
            if text not in self.config.category_examples:
                await message.reply_text(
                    "❌ Please choose one of the categories:",
                    reply_markup=self.keyboards.categories_keyboard(),
                )
                return
            state.category = text
            state.step = Step.AWAITING_DESCRIPTION
            self.states.set(chat_id, state)
            example = self.config.category_examples.get(text) or "write a description"
            await message.reply_text(
                f"Write a short description:\nExample: {example}",
                reply_markup=self.keyboards.remove(),
            )
            return

        if state.step is Step.AWAITING_DESCRIPTION:
            if text in self.config.category_examples:
                await message.reply_text(
                    f"❌ The category is already chosen ({state.category}).\nPlease write a description:"
                )
                return
            try:
                description = validate_description(text, self.config.description_max_length)
            except ValidationError as exc:
                await message.reply_text(f"❌ {exc}.\nPlease write the description again:")
                return
            state.description = description
            state.step = Step.AWAITING_AMOUNT
            self.states.set(chat_id, state)
            await message.reply_text("Enter the amount:\nExample: 15000")
            return

        if state.step is Step.AWAITING_AMOUNT:
            try:
                amount = parse_amount(text, self.config.max_amount)
            except ValidationError as exc:
                await message.reply_text(f"❌ {exc}\nPlease enter it again:")
                return

            # Success or not, the flow ends here; a failed save is not retried
            self.states.clear(chat_id)
            try:
                expense = await self._call(
                    self.storage.add_expense,
                    chat_id,
                    state.category,
                    state.description,
                    amount,
                    self._today(),
                )
            except StorageError as exc:
                logger.error("Saving expense for %s failed: %s", chat_id, exc)
                await message.reply_text(
                    "❌ The expense could not be saved. Please start again.",
                    reply_markup=self.keyboards.main_menu(),
                )
                return

            logger.info("Saved expense %s for chat %s", expense.id, chat_id)
            await message.reply_text(
                render_saved(expense, self.config.currency),
                reply_markup=self.keyboards.main_menu(),
            )

    async def handle_text(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        text = (update.message.text or "").strip()
        if not text:
            return
        chat_id = update.effective_chat.id

        state = self.states.get(chat_id)
        if state is not None and state.in_flow:
            await self._continue_entry(update, context, state, text)
            return

        handler = self._menu_handlers.get(text)
        if handler is None:
            await update.message.reply_text(
                "❌ Unknown command. Send /help for help.",
                reply_markup=self.keyboards.main_menu(),
            )
            return
        await handler(update, context)

    # ------------------------------------------------------------------
    # Listing and reports
    # ------------------------------------------------------------------

    async def _send_listing(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, page: int = 0, query=None) -> None:
        per_page = self.config.expenses_per_page
        try:
            total = await self._call(self.storage.get_expenses_count, chat_id)
            page_info = paginate(total, page, per_page)
            rows = []
            if total:
                rows = await self._call(self.storage.get_paginated_expenses, chat_id, per_page, page_info.offset)
        except StorageError as exc:
            logger.error("Listing expenses for %s failed: %s", chat_id, exc)
            await self._fail(context, chat_id)
            return

        if not total:
            await self._deliver(context, chat_id, "📋 All expenses\n\n❗ No expenses recorded yet.", None, query)
            return

        text = render_listing(rows, total, page_info, self.config.currency)
        await self._deliver(context, chat_id, text, self.keyboards.listing_keyboard(page_info, chat_id), query)

    async def _send_report(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, kind: ReportKind,
                           start: date, end: Optional[date] = None, page: int = 0, query=None) -> None:
        title = report_title(kind, start, end)
        try:
            records = await self._call(self.storage.get_period_report, chat_id, start, end)
        except StorageError as exc:
            logger.error("Period report for %s failed: %s", chat_id, exc)
            await self._fail(context, chat_id, "❌ The report could not be built")
            return

        summary = self.aggregator.summarize(records, page)
        text = render_report(title, summary, self.config.currency)
        markup = None
        if not summary.is_empty:
            markup = self.keyboards.report_keyboard(summary.page, chat_id, kind, start, end)
        await self._deliver(context, chat_id, text, markup, query)

    async def _send_charts(self, context: ContextTypes.DEFAULT_TYPE, chat_id: int, action: ChartAction) -> None:
        title = report_title(action.kind, action.start, action.end)
        try:
            records = await self._call(self.storage.get_period_report, chat_id, action.start, action.end)
        except StorageError as exc:
            logger.error("Chart data for %s failed: %s", chat_id, exc)
            await self._fail(context, chat_id)
            return

        if not records:
            await self._send(context, chat_id, f"{title}\n\n❗ No expenses in this period.")
            return

        totals = {category: float(total) for category, total in self.aggregator.category_totals(records).items()}
        pie = self.viz.pie_chart(totals, "Spending by category")
        if pie:
            await context.bot.send_photo(chat_id=chat_id, photo=InputFile(pie, filename="categories.png"), caption=title)
        bar = self.viz.bar_chart(daily_totals(records), "Daily spending")
        if bar:
            await context.bot.send_photo(chat_id=chat_id, photo=InputFile(bar, filename="daily.png"), caption="📈 Daily trend")

    # ------------------------------------------------------------------
    # Inline buttons
    # ------------------------------------------------------------------

    async def _delete(self, expense_id: str, owner_id: int) -> None:
        deleted = await self._call(self.storage.delete_expense, expense_id, owner_id)
        if not deleted:
            raise NotFoundError(expense_id)

    async def _handle_menu_action(self, action: MenuAction, context: ContextTypes.DEFAULT_TYPE, chat_id: int) -> None:
        if action is MenuAction.EXAMPLES:
            await self._send(context, chat_id, render_examples(self.config.category_examples))
        elif action is MenuAction.STATS_TODAY:
            await self._send_report(context, chat_id, ReportKind.TODAY, self._today())
        elif action is MenuAction.MAIN_MENU:
            await self._send(context, chat_id, "Main menu:")

    async def button_callback(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        query = update.callback_query
        try:
            await query.answer()
        except TelegramError as exc:
            logger.debug("answer_callback_query failed: %s", exc)
        if query.message is None:
            # Telegram omits messages that are too old to be accessed
            logger.debug("Ignoring callback %r: message is inaccessible", query.data)
            return
        chat_id = query.message.chat_id
        logger.debug("callback: chat_id=%s data=%s", chat_id, query.data)

        action = decode_action(query.data)
        if action is None:
            return

        if isinstance(action, MenuAction):
            await self._handle_menu_action(action, context, chat_id)
            return

        if action.owner_id != chat_id:
            logger.warning("Ignoring %s from chat %s: owned by %s", type(action).__name__, chat_id, action.owner_id)
            return

        if isinstance(action, DeleteAction):
            try:
                await self._delete(action.expense_id, chat_id)
            except NotFoundError:
                await self._edit_or_send(query, context, "❌ Expense not found")
            except StorageError as exc:
                logger.error("Deleting expense %s for %s failed: %s", action.expense_id, chat_id, exc)
                await self._edit_or_send(query, context, "❌ Failed to delete the expense")
            else:
                await self._edit_or_send(query, context, "✅ Expense deleted successfully!")
                await self._send(context, chat_id, "Expense deleted. Choose a new action:")
            return

        if isinstance(action, CancelDeleteAction):
            try:
                await query.message.delete()
            except TelegramError as exc:
                logger.debug("delete_message failed: %s", exc)
            await self._send(context, chat_id, "Deletion cancelled. Choose a new action:")
            return

        if isinstance(action, ListAction):
            await self._send_listing(context, chat_id, page=action.page, query=query)
            return

        if isinstance(action, ReportAction):
            await self._send_report(context, chat_id, action.kind, action.start, action.end, action.page, query=query)
            return

        if isinstance(action, ChartAction):
            await self._send_charts(context, chat_id, action)

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    async def error_handler(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Unhandled error", exc_info=context.error)
        chat = getattr(update, "effective_chat", None)
        if chat is None:
            return
        try:
            await self._fail(context, chat.id, "❌ Something went wrong. Please try again.")
        except TelegramError as exc:
            logger.error("Could not notify chat %s about the error: %s", chat.id, exc)


__all__ = ["ExpenseBot", "GENERIC_FAILURE"]

"""Shared constants for Harajat Bot."""

from typing import Dict, List

CATEGORY_EXAMPLES: Dict[str, str] = {
    "🍔 Food": "burger, plov, pepsi, breakfast",
    "🚕 Transport": "taxi, metro, fare, bus",
    "👕 Clothing": "t-shirt, trousers, sneakers, coat",
    "📱 Electronics": "phone, charger, tablet, headphones",
    "🚗 Car": "fuel, repair, car wash, parking",
    "🏠 Household": "light bulb, carpet, kitchenware",
    "💊 Health": "medicine, vitamins, doctor, lab test",
    "📦 Other": "gift, charity, toy, book",
}

CATEGORIES: List[str] = list(CATEGORY_EXAMPLES)

MAX_AMOUNT = 1_000_000_000
DESCRIPTION_MAX_LENGTH = 200
EXPENSES_PER_PAGE = 5
REPORT_PER_PAGE = 5
CURRENCY = "so'm"

# Reply-keyboard labels of the main menu
BTN_ADD = "➕ Add expense"
BTN_DELETE_LAST = "🗑 Delete last expense"
BTN_WEEK = "📊 Weekly report"
BTN_MONTH = "📈 Monthly report"
BTN_TODAY = "📅 Today's report"
BTN_SETTINGS = "⚙️ Settings"
BTN_HELP = "ℹ️ Help"
BTN_ALL = "📋 All expenses"
BTN_CANCEL = "❌ Cancel"

MAIN_MENU_LAYOUT: List[List[str]] = [
    [BTN_ADD, BTN_DELETE_LAST],
    [BTN_WEEK, BTN_MONTH],
    [BTN_TODAY, BTN_SETTINGS],
    [BTN_HELP, BTN_ALL],
]

# Older clients still send this label for delete-last
LEGACY_DELETE_LABELS = ("✏️ Delete last expense",)

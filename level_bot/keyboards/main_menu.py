from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton


def main_menu_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text="📝 Test your level", callback_data="start_test")],
        [InlineKeyboardButton(text="🎤 Interview practice", callback_data="start_interview")],
    ])

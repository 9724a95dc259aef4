from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton

from level_bot.config import SUBJECTS


def subject_keyboard() -> InlineKeyboardMarkup:
    buttons = []
    slugs = list(SUBJECTS)
    # Two subjects per row
    for i in range(0, len(slugs), 2):
        buttons.append([
            InlineKeyboardButton(
                text=f"{SUBJECTS[slug]['emoji']} {SUBJECTS[slug]['name']}",
                callback_data=f"subject:{slug}",
            )
            for slug in slugs[i:i + 2]
        ])
    buttons.append([InlineKeyboardButton(text="🔙 Back", callback_data="go_home")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)

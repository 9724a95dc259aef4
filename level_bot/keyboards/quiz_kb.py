from aiogram.types import InlineKeyboardMarkup, InlineKeyboardButton


def options_keyboard(options: tuple[str, ...] | list[str], selected: int | None = None) -> InlineKeyboardMarkup:
    labels = ["A", "B", "C", "D"]
    buttons = []
    for i, option in enumerate(options):
        label = labels[i] if i < len(labels) else str(i + 1)
        mark = "🔘 " if i == selected else ""
        buttons.append([InlineKeyboardButton(
            text=f"{mark}{label}) {option}",
            callback_data=f"opt:{i}",
        )])
    buttons.append([InlineKeyboardButton(text="✅ Check answer", callback_data="check_answer")])
    buttons.append([InlineKeyboardButton(text="❌ Cancel test", callback_data="cancel_quiz")])
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def next_keyboard(is_last: bool) -> InlineKeyboardMarkup:
    text = "🏁 Finish test" if is_last else "➡️ Next question"
    return InlineKeyboardMarkup(inline_keyboard=[
        [InlineKeyboardButton(text=text, callback_data="next_question")],
    ])

import logging

from aiogram import Router
from aiogram.types import Message
from aiogram.fsm.context import FSMContext

from level_bot.handlers.quiz import discard_test
from level_bot.keyboards.main_menu import main_menu_keyboard
from level_bot.services.narrative import finalize_with_narrative
from level_bot.services.report_formatter import format_report

logger = logging.getLogger(__name__)

router = Router()


async def show_results(message: Message, user_id: int, state: FSMContext):
    """Show the final report of the user's level test."""
    test = discard_test(user_id)
    await state.clear()
    if test is None:
        await message.answer("No finished test found.", reply_markup=main_menu_keyboard())
        return

    await message.answer("🔎 Analyzing your answers...")
    report = await finalize_with_narrative(test.collector.session)
    logger.info(
        "User %s finished %s: %d/%d, level %s",
        user_id, report.subject, report.score, report.question_count, report.overall_level.value,
    )

    await message.answer(
        format_report(report, time_spent=test.tracker.session_seconds()),
        reply_markup=main_menu_keyboard(),
        parse_mode="HTML",
    )

import logging

from aiogram import Router, F
from aiogram.types import CallbackQuery
from aiogram.fsm.context import FSMContext

from level_bot.config import SUBJECTS
from level_bot.keyboards.subject_kb import subject_keyboard
from level_bot.states.quiz_states import LevelTestFlow

logger = logging.getLogger(__name__)

router = Router()


@router.callback_query(F.data == "start_test")
async def choose_subject(callback: CallbackQuery, state: FSMContext):
    await state.set_state(LevelTestFlow.choosing_subject)
    await callback.message.edit_text(
        "📚 Which subject do you want to test?",
        reply_markup=subject_keyboard(),
    )
    await callback.answer()


@router.callback_query(LevelTestFlow.choosing_subject, F.data.startswith("subject:"))
async def subject_selected(callback: CallbackQuery, state: FSMContext):
    subject = callback.data.split(":", 1)[1]
    info = SUBJECTS.get(subject)
    if info is None:
        await callback.answer("Unknown subject", show_alert=True)
        return

    await state.set_state(LevelTestFlow.generating_test)
    await callback.message.edit_text(
        f"⏳ Preparing your {info['name']} level test...\n\n"
        f"Topics: {', '.join(info['topics'])}\n\n"
        f"This takes 10-20 seconds."
    )
    await callback.answer()

    # Imported here to avoid circular imports
    from level_bot.services.session_builder import start_session
    from level_bot.handlers.quiz import start_quiz

    session = await start_session(subject)
    logger.info("User %s started a %s level test", callback.from_user.id, subject)

    await state.update_data(subject=subject)
    await state.set_state(LevelTestFlow.answering_question)
    await start_quiz(callback.message, callback.from_user.id, session)

import logging

from aiogram import Router, F
from aiogram.filters import Command, CommandObject
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from level_bot.keyboards.main_menu import main_menu_keyboard
from level_bot.services.interview import generate_interview_questions
from level_bot.services.report_formatter import format_interview_questions
from level_bot.states.quiz_states import InterviewFlow

logger = logging.getLogger(__name__)

router = Router()

ROLE_PROMPT = "✏️ Which role are you preparing for? For example: Frontend Developer"


@router.callback_query(F.data == "start_interview")
async def ask_role(callback: CallbackQuery, state: FSMContext):
    await state.set_state(InterviewFlow.entering_role)
    await callback.message.edit_text(ROLE_PROMPT)
    await callback.answer()


@router.message(Command("interview"))
async def cmd_interview(message: Message, command: CommandObject, state: FSMContext):
    role = (command.args or "").strip()
    if not role:
        await state.set_state(InterviewFlow.entering_role)
        await message.answer(ROLE_PROMPT)
        return
    await send_interview_questions(message, role, state)


@router.message(InterviewFlow.entering_role)
async def role_entered(message: Message, state: FSMContext):
    role = (message.text or "").strip()
    if not role:
        await message.answer("The role can't be empty. Which role are you preparing for?")
        return
    await send_interview_questions(message, role, state)


async def send_interview_questions(message: Message, role: str, state: FSMContext):
    await state.clear()
    await message.answer(f"⏳ Preparing interview questions for {role}...")

    questions = await generate_interview_questions(role)
    logger.info("User %s requested interview questions for %r", message.from_user.id, role)

    await message.answer(
        format_interview_questions(role, questions),
        reply_markup=main_menu_keyboard(),
        parse_mode="HTML",
    )

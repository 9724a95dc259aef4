from aiogram import Router, F
from aiogram.filters import CommandStart
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from level_bot.handlers.quiz import discard_test
from level_bot.keyboards.main_menu import main_menu_keyboard

router = Router()

WELCOME_TEXT = (
    "👋 Hi! I can check your level in a subject.\n\n"
    "You'll get 10 questions from very easy to expert, each with a timer. "
    "At the end you'll see how you did in every topic and where to start practising."
)


@router.message(CommandStart())
async def cmd_start(message: Message, state: FSMContext):
    discard_test(message.from_user.id)
    await state.clear()
    await message.answer(WELCOME_TEXT, reply_markup=main_menu_keyboard())


@router.callback_query(F.data == "go_home")
async def go_home(callback: CallbackQuery, state: FSMContext):
    discard_test(callback.from_user.id)
    await state.clear()
    await callback.message.edit_text(WELCOME_TEXT, reply_markup=main_menu_keyboard())
    await callback.answer()

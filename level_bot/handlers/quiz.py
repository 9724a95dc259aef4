import logging
from dataclasses import dataclass

from aiogram import Router, F
from aiogram.types import Message, CallbackQuery
from aiogram.fsm.context import FSMContext

from level_bot.exceptions import SessionStateError
from level_bot.keyboards.main_menu import main_menu_keyboard
from level_bot.keyboards.quiz_kb import next_keyboard, options_keyboard
from level_bot.models import AnswerRecord, AssessmentSession
from level_bot.services.activity_timer import ActiveTimeTracker
from level_bot.services.answer_collector import CollectorState, TimedAnswerCollector
from level_bot.services.report_formatter import format_feedback, format_question
from level_bot.states.quiz_states import LevelTestFlow

logger = logging.getLogger(__name__)

router = Router()


@dataclass
class ActiveTest:
    collector: TimedAnswerCollector
    tracker: ActiveTimeTracker

    def dispose(self):
        self.collector.dispose()
        self.tracker.stop()


# One running test per user; timers are owned here and cancelled on discard
_active_tests: dict[int, ActiveTest] = {}


def get_test(user_id: int) -> ActiveTest | None:
    return _active_tests.get(user_id)


def discard_test(user_id: int) -> ActiveTest | None:
    """Stop and forget the user's running test, if any."""
    test = _active_tests.pop(user_id, None)
    if test is not None:
        test.dispose()
    return test


async def start_quiz(message: Message, user_id: int, session: AssessmentSession):
    """Register the test for the user and send the first question."""
    discard_test(user_id)
    collector = TimedAnswerCollector(session, on_timeout=_timeout_hook(message, user_id))
    test = ActiveTest(collector=collector, tracker=ActiveTimeTracker())
    _active_tests[user_id] = test

    test.tracker.start()
    await _send_current_question(message, collector)
    collector.start()


def _timeout_hook(message: Message, user_id: int):
    async def on_timeout(record: AnswerRecord):
        test = _active_tests.get(user_id)
        if test is None:
            return
        question = test.collector.session.questions[record.question_index]
        await message.answer(
            format_feedback(question, record, timed_out=True),
            reply_markup=next_keyboard(test.collector.is_last_question),
            parse_mode="HTML",
        )
    return on_timeout


async def _send_current_question(message: Message, collector: TimedAnswerCollector):
    question = collector.current_question
    await message.answer(
        format_question(question, collector.current_index, len(collector.session.questions)),
        reply_markup=options_keyboard(question.options),
        parse_mode="HTML",
    )


@router.callback_query(LevelTestFlow.answering_question, F.data.startswith("opt:"))
async def option_selected(callback: CallbackQuery):
    test = get_test(callback.from_user.id)
    if test is None:
        await callback.answer("This test is no longer active")
        return

    test.tracker.record_activity()
    option = int(callback.data.split(":", 1)[1])
    if not test.collector.select(option):
        await callback.answer()
        return

    await callback.message.edit_reply_markup(
        reply_markup=options_keyboard(test.collector.current_question.options, selected=option)
    )
    await callback.answer()


@router.callback_query(LevelTestFlow.answering_question, F.data == "check_answer")
async def check_answer(callback: CallbackQuery):
    test = get_test(callback.from_user.id)
    if test is None:
        await callback.answer("This test is no longer active")
        return

    test.tracker.record_activity()
    collector = test.collector
    record = collector.check()
    if record is None:
        if collector.state is CollectorState.AWAITING_ANSWER:
            await callback.answer("Choose an option first")
        else:
            await callback.answer("This question is already answered")
        return

    await callback.answer()
    await callback.message.edit_reply_markup(reply_markup=None)
    await callback.message.answer(
        format_feedback(collector.current_question, record),
        reply_markup=next_keyboard(collector.is_last_question),
        parse_mode="HTML",
    )


@router.callback_query(LevelTestFlow.answering_question, F.data == "next_question")
async def next_question(callback: CallbackQuery, state: FSMContext):
    test = get_test(callback.from_user.id)
    if test is None:
        await callback.answer("This test is no longer active")
        return

    test.tracker.record_activity()
    try:
        question = test.collector.next()
    except SessionStateError:
        await callback.answer("Answer the current question first")
        return

    await callback.answer()
    await callback.message.edit_reply_markup(reply_markup=None)

    if question is None:
        from level_bot.handlers.results import show_results
        await show_results(callback.message, callback.from_user.id, state)
        return

    await _send_current_question(callback.message, test.collector)


@router.callback_query(F.data == "cancel_quiz")
async def cancel_quiz(callback: CallbackQuery, state: FSMContext):
    """Cancel the current test and go home."""
    if discard_test(callback.from_user.id) is not None:
        logger.info("User %s cancelled the level test", callback.from_user.id)
    await state.clear()
    await callback.message.answer(
        "Test cancelled. Back to the main menu.",
        reply_markup=main_menu_keyboard(),
    )
    await callback.answer()

"""Tests for the level test bot handlers (mocked Telegram objects)."""
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from level_bot.handlers.quiz import cancel_quiz, check_answer, discard_test, get_test, next_question, option_selected
from level_bot.handlers.interview import ask_role, cmd_interview, role_entered
from level_bot.handlers.subject import subject_selected
from level_bot.services.interview import default_interview_questions

USER_ID = 12345


def _callback(data: str):
    callback = AsyncMock()
    callback.data = data
    callback.from_user = SimpleNamespace(id=USER_ID)
    callback.message = AsyncMock()
    return callback


@pytest.fixture
def state():
    return AsyncMock()


@pytest.fixture(autouse=True)
def cleanup_tests():
    yield
    discard_test(USER_ID)


class TestSubjectSelected:
    @patch("level_bot.services.session_builder.start_session", new_callable=AsyncMock)
    async def test_starts_quiz(self, mock_start_session, session, state):
        mock_start_session.return_value = session
        callback = _callback("subject:math")

        await subject_selected(callback, state)

        mock_start_session.assert_awaited_once_with("math")
        assert get_test(USER_ID) is not None
        text = callback.message.answer.await_args.args[0]
        assert "Question 1 of 4" in text

    @patch("level_bot.services.session_builder.start_session", new_callable=AsyncMock)
    async def test_unknown_subject(self, mock_start_session, state):
        callback = _callback("subject:astrology")

        await subject_selected(callback, state)

        mock_start_session.assert_not_awaited()
        callback.answer.assert_awaited_once_with("Unknown subject", show_alert=True)


class TestQuizFlow:
    async def _start(self, session, state):
        with patch("level_bot.services.session_builder.start_session", new_callable=AsyncMock) as mock_start:
            mock_start.return_value = session
            await subject_selected(_callback("subject:math"), state)

    async def test_check_without_selection(self, session, state):
        await self._start(session, state)
        callback = _callback("check_answer")

        await check_answer(callback)

        callback.answer.assert_awaited_once_with("Choose an option first")
        assert session.answers == {}

    async def test_check_after_timeout(self, session, state):
        await self._start(session, state)
        collector = get_test(USER_ID).collector
        collector.time_left = 1
        await collector.tick()
        callback = _callback("check_answer")

        await check_answer(callback)

        callback.answer.assert_awaited_once_with("This question is already answered")
        assert session.answers[0].chosen_option_index is None

    async def test_next_before_check(self, session, state):
        await self._start(session, state)
        callback = _callback("next_question")

        await next_question(callback, state)

        callback.answer.assert_awaited_once_with("Answer the current question first")

    @patch("level_bot.services.narrative.chat_completion", new_callable=AsyncMock, return_value=None)
    async def test_full_walk_shows_results(self, mock_completion, session, state):
        await self._start(session, state)

        for question in session.questions:
            await option_selected(_callback(f"opt:{question.correct_option_index}"))
            check = _callback("check_answer")
            await check_answer(check)
            assert "Correct!" in check.message.answer.await_args.args[0]
            last = _callback("next_question")
            await next_question(last, state)

        assert get_test(USER_ID) is None
        final_text = last.message.answer.await_args.args[0]
        assert "Level test results" in final_text
        assert "4 of 4 (100%)" in final_text
        state.clear.assert_awaited()

    async def test_cancel_discards_test(self, session, state):
        await self._start(session, state)
        test = get_test(USER_ID)

        await cancel_quiz(_callback("cancel_quiz"), state)

        assert get_test(USER_ID) is None
        assert test.collector._task is None
        state.clear.assert_awaited_once()


def _message(text: str = ""):
    message = AsyncMock()
    message.text = text
    message.from_user = SimpleNamespace(id=USER_ID)
    return message


class TestInterview:
    async def test_menu_button_asks_for_role(self, state):
        callback = _callback("start_interview")

        await ask_role(callback, state)

        state.set_state.assert_awaited_once()
        assert "Which role" in callback.message.edit_text.await_args.args[0]

    @patch("level_bot.handlers.interview.generate_interview_questions", new_callable=AsyncMock)
    async def test_command_with_role(self, mock_generate, state):
        mock_generate.return_value = default_interview_questions()
        message = _message("/interview Data Analyst")

        await cmd_interview(message, SimpleNamespace(args="Data Analyst"), state)

        mock_generate.assert_awaited_once_with("Data Analyst")
        text = message.answer.await_args.args[0]
        assert "Interview questions for Data Analyst" in text
        assert "Technical" in text and "Behavioral" in text
        assert "closures in JavaScript" in text
        state.clear.assert_awaited()

    @patch("level_bot.handlers.interview.generate_interview_questions", new_callable=AsyncMock)
    async def test_command_without_role_asks(self, mock_generate, state):
        message = _message("/interview")

        await cmd_interview(message, SimpleNamespace(args=None), state)

        mock_generate.assert_not_awaited()
        state.set_state.assert_awaited_once()

    @patch("level_bot.handlers.interview.generate_interview_questions", new_callable=AsyncMock)
    async def test_role_entered_escapes_text(self, mock_generate, state):
        mock_generate.return_value = {
            "technical": [{"id": "tech-1", "question": "What does <div> do?"}],
            "behavioral": [{"id": "behav-1", "question": "Tell me about a deadline."}],
        }
        message = _message("  QA <Engineer>  ")

        await role_entered(message, state)

        mock_generate.assert_awaited_once_with("QA <Engineer>")
        text = message.answer.await_args.args[0]
        assert "&lt;div&gt;" in text
        assert "QA &lt;Engineer&gt;" in text

    @patch("level_bot.handlers.interview.generate_interview_questions", new_callable=AsyncMock)
    async def test_empty_role_rejected(self, mock_generate, state):
        message = _message("   ")

        await role_entered(message, state)

        mock_generate.assert_not_awaited()
        assert "can't be empty" in message.answer.await_args.args[0]

from aiogram.fsm.state import StatesGroup, State


class LevelTestFlow(StatesGroup):
    choosing_subject = State()
    generating_test = State()
    answering_question = State()


class InterviewFlow(StatesGroup):
    entering_role = State()

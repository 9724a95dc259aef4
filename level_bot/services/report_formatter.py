import html

from level_bot.config import SUBJECTS
from level_bot.models import AnswerRecord, AssessmentReport, Question, TopicPerformance

LEVEL_TITLES = {
    "easy": "Easy",
    "beginner": "Beginner",
    "intermediate": "Intermediate",
    "hard": "Hard",
}


def score_comment(percent: int) -> tuple[str, str]:
    """Pick an emoji and a comment for a score."""
    if percent >= 90:
        return "🏆", "Outstanding! You have mastery-level knowledge."
    if percent >= 75:
        return "🌟", "Excellent work! You have strong knowledge in this subject."
    if percent >= 60:
        return "👍", "Good job! You have a solid foundation to build upon."
    if percent >= 40:
        return "📖", "You're making progress! Focus on the fundamentals."
    return "💪", "Keep practicing! You're just getting started."


def format_question(question: Question, index: int, total: int) -> str:
    return (
        f"❓ Question {index + 1} of {total}\n"
        f"📚 {html.escape(question.topic)} · {question.difficulty.label}\n"
        f"⏱ {question.expected_time_seconds} seconds\n\n"
        f"{html.escape(question.text)}"
    )


def format_feedback(question: Question, record: AnswerRecord, timed_out: bool = False) -> str:
    lines = []
    if timed_out:
        lines.append("⏰ Time's up!")

    if record.chosen_option_index == question.correct_option_index:
        lines.append("✅ Correct!")
    elif record.chosen_option_index is None:
        lines.append(f"❌ No answer.\n\n📝 Correct answer: {html.escape(question.correct_answer)}")
    else:
        lines.append(f"❌ Incorrect.\n\n📝 Correct answer: {html.escape(question.correct_answer)}")

    if question.explanation:
        lines.append(f"💡 {html.escape(question.explanation)}")
    return "\n\n".join(lines)


def format_topic(perf: TopicPerformance) -> str:
    marker = "⚠️" if perf.needs_improvement else "✅"
    lines = [
        f"{marker} <b>{html.escape(perf.topic)}</b>: {perf.correct_count}/{perf.total_count} "
        f"· pace ×{perf.average_time_ratio:.2f} · level {LEVEL_TITLES[perf.recommended_level.value]}"
    ]
    lines.extend(f"   ➕ {html.escape(s)}" for s in perf.strengths)
    lines.extend(f"   ➖ {html.escape(w)}" for w in perf.weaknesses)
    return "\n".join(lines)


def format_report(report: AssessmentReport, time_spent: int | None = None) -> str:
    """Render a finished session as an HTML message."""
    subject = SUBJECTS.get(report.subject, {})
    emoji, comment = score_comment(report.score_percent)

    parts = [
        f"📊 <b>Level test results</b>\n\n"
        f"{subject.get('emoji', '📚')} Subject: {html.escape(subject.get('name', report.subject))}\n"
        f"{emoji} Correct: {report.score} of {report.question_count} ({report.score_percent}%)\n"
        f"🎯 Recommended level: <b>{LEVEL_TITLES[report.overall_level.value]}</b>\n\n"
        f"{comment}"
    ]
    if time_spent is not None:
        minutes, seconds = divmod(time_spent, 60)
        parts.append(f"⏱ Time: {minutes}:{seconds:02d}")

    if report.topics:
        parts.append("\n\n".join(format_topic(perf) for perf in report.topics))

    if report.narrative:
        parts.append(f"📝 {html.escape(report.narrative)}")

    return "\n\n".join(parts)


def format_interview_questions(role: str, questions: dict[str, list[dict]]) -> str:
    lines = [f"🎤 <b>Interview questions for {html.escape(role)}</b>", ""]
    for section, title in (("technical", "💻 Technical"), ("behavioral", "🤝 Behavioral")):
        lines.append(f"<b>{title}</b>")
        for i, item in enumerate(questions.get(section, []), 1):
            lines.append(f"{i}. {html.escape(item['question'])}")
        lines.append("")
    return "\n".join(lines).rstrip()

from level_bot.models import BAND_TIME_BUDGETS, AssessmentReport, Difficulty


def build_level_test_prompt(subject_name: str, topics: list[str], per_band: int) -> str:
    total = per_band * len(Difficulty)
    bands = "\n".join(
        f"- {per_band} {band.label.upper()} questions (about {BAND_TIME_BUDGETS[band]} seconds each)"
        for band in Difficulty
    )
    topic_list = ", ".join(topics)

    return f"""Generate {total} quiz questions to test a student's knowledge level in {subject_name}.

Spread the questions evenly over these topics in {subject_name}:
{topic_list}

Create questions with varying difficulty levels:
{bands}

Each question must have:
- A clear question text
- Exactly four answer choices
- The index of the correct answer (0-3)
- A brief explanation
- The difficulty level, one of: {", ".join(band.label for band in Difficulty)}
- The specific topic it belongs to (one of: {topic_list})
- An expected time to answer in seconds (between 15 and 60, harder questions get more time)

Return ONLY valid JSON formatted like this:
[
  {{
    "question": "What is 2 + 2?",
    "options": ["3", "4", "5", "6"],
    "correctAnswer": 1,
    "explanation": "2 + 2 equals 4.",
    "difficulty": "very easy",
    "topic": "Arithmetic",
    "expectedTime": 15
  }}
]"""


def build_analysis_prompt(subject_name: str, report: AssessmentReport) -> str:
    lines = []
    for perf in report.topics:
        lines.append(
            f"- {perf.topic}: {perf.correct_count}/{perf.total_count} correct, "
            f"time ratio {perf.average_time_ratio:.2f}, level {perf.recommended_level.value}"
        )
        for item in perf.questions:
            status = "correct" if item.is_correct else "wrong"
            lines.append(
                f"    * [{item.difficulty.label}] {item.question} -> {status}, "
                f"{item.time_spent}s of {item.expected_time}s"
            )
    stats = "\n".join(lines)

    return f"""A student just finished a {subject_name} level test.
Overall score: {report.score}/{report.question_count} ({report.score_percent}%).
Recommended level: {report.overall_level.value}.

Per-topic results (time ratio above 1 means slower than expected):
{stats}

Write a short, encouraging analysis for the student (4-6 sentences, plain text, no markdown).
Name the strongest topic, the topic to practise first, and one concrete study tip."""


def build_interview_prompt(role: str, count: int = 10) -> str:
    return f"""Generate interview questions for a candidate applying for the role of {role}.

Create {count} technical questions that test the knowledge and skills the role needs,
and {count} behavioral questions that assess soft skills, analytical thinking, and cultural fit.

Format your response as a valid JSON object with this structure:
{{
  "technical": [
    {{"id": "tech-1", "question": "Question text here"}}
  ],
  "behavioral": [
    {{"id": "behav-1", "question": "Question text here"}}
  ]
}}

Output ONLY the JSON object."""

"""Configuration settings using pydantic-settings."""
from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Telegram Bot
    BOT_TOKEN: str = Field(default="", description="Telegram Bot API token")

    # LLM (any OpenAI-compatible endpoint)
    LLM_BASE_URL: str = Field(
        default="http://localhost:1234/v1",
        description="Base URL of the OpenAI-compatible API"
    )
    LLM_API_KEY: str = Field(default="not-needed", description="API key for the LLM endpoint")
    LLM_MODEL: str = Field(default="qwen2.5-7b-instruct", description="Model name")
    LLM_TEMPERATURE: float = Field(default=0.7, description="Sampling temperature")
    LLM_MAX_TOKENS: int = Field(default=4096, description="Maximum tokens per completion")

    # Level test
    GENERATION_TIMEOUT_SECONDS: float = Field(
        default=15.0,
        description="Generation calls slower than this fall back to local content"
    )
    QUESTIONS_PER_BAND: int = Field(
        default=2,
        description="Questions generated for each difficulty band"
    )
    IDLE_THRESHOLD_SECONDS: int = Field(
        default=60,
        description="Inactivity longer than this stops active time accrual"
    )

    # Logging
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )

    class Config:
        """Pydantic config."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"


# Global settings instance
settings = Settings()


SUBJECTS = {
    "math": {
        "name": "Mathematics",
        "emoji": "🧮",
        "topics": ["Algebra", "Geometry", "Arithmetic", "Statistics", "Probability"],
    },
    "science": {
        "name": "Science",
        "emoji": "🔬",
        "topics": ["Biology", "Chemistry", "Physics", "Earth Science", "Astronomy"],
    },
    "reading": {
        "name": "Reading",
        "emoji": "📖",
        "topics": ["Comprehension", "Vocabulary", "Grammar", "Literature", "Poetry"],
    },
    "coding": {
        "name": "Coding",
        "emoji": "💻",
        "topics": ["HTML", "CSS", "JavaScript", "Python", "Algorithms"],
    },
    "art": {
        "name": "Art",
        "emoji": "🎨",
        "topics": ["Drawing", "Painting", "Sculpture", "Art History", "Digital Art"],
    },
    "music": {
        "name": "Music",
        "emoji": "🎵",
        "topics": ["Theory", "Instruments", "Composition", "Music History", "Rhythm"],
    },
    "geography": {
        "name": "Geography",
        "emoji": "🌍",
        "topics": ["Countries", "Landforms", "Climate", "Maps", "Human Geography"],
    },
    "logic": {
        "name": "Logic",
        "emoji": "💡",
        "topics": ["Puzzles", "Critical Thinking", "Deduction", "Patterns", "Problem Solving"],
    },
}

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "SubSmart"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    DATABASE_URL: str = "sqlite+aiosqlite:///./subsmart.db"

    # Reminders
    REMINDER_WINDOW_DAYS: int = 7
    NOTIFY_THRESHOLD_DAYS: int = 3
    NOTIFICATIONS_ENABLED: bool = True
    DISCORD_WEBHOOK_URL: str = ""
    SCHEDULER_ENABLED: bool = True

    # Gemini
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"

    DEFAULT_CURRENCY: str = "TWD"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()

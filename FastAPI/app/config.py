from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Required from environment (.env / deployment secrets)
    database_url: str
    secret_key: str
    algorithm: str = "HS256"
    app_env: str = "development"  # development, staging, production

    # CORS origins as comma-separated values
    # Example: "https://app.example.com,https://admin.example.com"
    cors_allow_origins: str = "http://localhost:5173"

    log_level: str = "INFO"  # DEBUG, INFO, WARNING, ERROR

    # External run-daily function (collect -> score -> draft)
    pipeline_trigger_url: str = ""

    # Bounded timeout for every remote call (pipeline function, store statements)
    remote_timeout_seconds: float = 30.0
    db_statement_timeout_ms: int = 30_000

    # Edit size limits for cover letters and answers
    max_cover_letter_chars: int = 20_000
    max_answers: int = 50
    max_question_chars: int = 1_000
    max_answer_chars: int = 5_000

    # Request guards
    rate_limit_pipeline_per_min: int = 5
    rate_limit_mutation_per_min: int = 60

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "postgresql+asyncpg://localhost:5432/nutrikernel"
    default_tz: str = "UTC"  # "today" for target dates and calibration windows
    kernel_api_key: str | None = None
    log_level: str = "INFO"

    # Goal history
    goals_history_limit: int = 10

    # TDEE calibration (trailing window over intake logs + weigh-ins)
    calibration_window_days: int = 28
    calibration_min_log_days: int = 14
    calibration_min_weigh_ins: int = 2

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

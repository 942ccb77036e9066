from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Canonical database
    database_url: str = "sqlite:///./timesheets.db"

    app_name: str = "Timesheets"
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()

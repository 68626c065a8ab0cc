from pydantic_settings import BaseSettings, SettingsConfigDict
class Settings(BaseSettings):
    APP_ENV: str = "dev"
    APP_SECRET: str
    DB_URL: str = "sqlite:///./salon.db"
    TENANT_ID: str = "default"
    JWT_ISS: str = "salon"
    JWT_EXP_MIN: int = 12*60
    HISTORY_PAGE_SIZE: int = 50
    LOG_LEVEL: str = "INFO"
    TZ: str = "UTC"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
settings = Settings()

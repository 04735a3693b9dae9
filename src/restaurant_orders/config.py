from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./orders.db"
    DATABASE_ECHO: bool = False
    AUTO_CREATE_TABLES: bool = True  # в проде схему ведёт alembic
    SEED_DEMO_ORDERS: bool = True
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    class Config:
        env_file = ".env"

settings = Settings()

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./school.db"
    SECRET_KEY: str = "dev-secret-school"
    JWT_ALGORITHM: str = "HS256"
    TOKEN_TTL_MINUTES: int = 24 * 60
    DB_TIMEOUT_SECONDS: int = 5
    LOG_LEVEL: str = "INFO"
    RATE_LIMIT_ENABLED: bool = True
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

# eom/config.py
from pydantic_settings import BaseSettings
from typing import Optional
from pydantic import Field

class Settings(BaseSettings):
    SECRET_KEY: str = Field("change-me-in-production")
    ALGORITHM: str = Field("HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(30)

    DATABASE_URL: str = Field("sqlite+aiosqlite:///./eom.db")
    SQLALCHEMY_DATABASE_URL: Optional[str] = None

    # Echo generated SQL to the log
    SQL_ECHO: bool = Field(False)

    model_config = {
        "env_file": ".env",
        "extra": "allow",
    }

    @property
    def effective_database_url(self) -> str:
        url = self.SQLALCHEMY_DATABASE_URL or self.DATABASE_URL
        # Ensure asyncpg is used
        if url.startswith("postgresql://") and "+asyncpg" not in url:
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

settings = Settings()

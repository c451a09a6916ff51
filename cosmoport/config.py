from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Literal


class Settings(BaseSettings):
    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")

    # Storage settings
    # - sql: SQLModel tables on an async SQLAlchemy engine
    # - memory: in-process dict, scanned on every query
    storage_backend: Literal["sql", "memory"] = Field(
        default="sql", description="Storage backend for ship records"
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./cosmoport.db",
        description="Database connection URL",
    )

    # Pagination settings
    default_page_size: int = Field(
        default=3, description="Page size used when the client sends none"
    )
    max_page_size: int = Field(
        default=1000, description="Largest page size a client may request"
    )

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

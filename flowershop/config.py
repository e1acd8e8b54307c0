from pydantic_settings import BaseSettings
from typing import List, Optional
from urllib.parse import quote_plus

class Settings(BaseSettings):
    env: str = "local"

    postgres_user: str = "postgres"
    postgres_password: str = "postgres"
    postgres_db: str = "flowershop"
    postgres_host: str = "localhost"
    postgres_port: str = "5432"

    # takes precedence over the postgres_* parts (sqlite for local runs)
    sqlalchemy_database_url: Optional[str] = None
    sql_echo: bool = False

    session_cookie_name: str = "sessionId"
    session_header_name: str = "X-Session-Id"
    session_ttl_hours: int = 24
    session_refresh_days: int = 30
    cookie_domain: Optional[str] = None

    cors_origins: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    log_level: str = "INFO"
    log_dir: Optional[str] = None

    max_upload_size_mb: int = 10
    active_user_window_minutes: int = 15
    default_page_size: int = 20

    @property
    def database_url(self):
        if self.sqlalchemy_database_url:
            return self.sqlalchemy_database_url
        encoded_password = quote_plus(self.postgres_password)
        return (
            f"postgresql+psycopg2://{self.postgres_user}:"
            f"{encoded_password}@{self.postgres_host}:"
            f"{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "allow"

settings = Settings()

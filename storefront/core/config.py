"""Storefront Client Configuration"""

import os
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Client settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = False

    # Remote store
    store_base_url: str = "http://localhost:8080"
    request_timeout: float = 30.0

    # Session persistence
    session_file: str = os.path.join("~", ".storefront", "session.json")
    token_leeway_seconds: int = 30

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "STOREFRONT_"
        case_sensitive = False

    @property
    def session_path(self) -> str:
        """Session file with the user directory expanded"""
        return os.path.expanduser(self.session_file)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()

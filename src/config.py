"""Application configuration.

Settings are read from environment variables (and an optional ``.env`` file)
using pydantic-settings. Variable names are case-insensitive.
"""

from functools import lru_cache
from typing import List, Optional
from urllib.parse import quote_plus

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_MONGODB_URI = "mongodb://localhost:27017"


class Settings(BaseSettings):
    """Service settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    mongodb_uri: Optional[str] = Field(default=None, description="Explicit MongoDB URI")
    db_user: Optional[str] = None
    db_pass: Optional[str] = None
    db_cluster_host: str = "cluster0.fj5vaxe.mongodb.net"
    db_app_name: str = "Cluster0"
    db_name: str = "localFoodDB"
    server_selection_timeout_ms: int = 5000

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])

    @property
    def resolved_mongodb_uri(self) -> str:
        """Connection URI for the document store.

        An explicit ``MONGODB_URI`` wins. Otherwise Atlas credentials build an
        SRV URI, and with neither the local default is used.
        """
        if self.mongodb_uri:
            return self.mongodb_uri

        if self.db_user and self.db_pass:
            return (
                f"mongodb+srv://{quote_plus(self.db_user)}:{quote_plus(self.db_pass)}"
                f"@{self.db_cluster_host}/?appName={self.db_app_name}"
            )

        return LOCAL_MONGODB_URI


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return Settings()

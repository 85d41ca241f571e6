from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAX_CONNECTIONS = 20


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="MPNS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    max_connections: int = Field(default=DEFAULT_MAX_CONNECTIONS, ge=1)
    max_connections_per_host: Optional[int] = Field(default=None, ge=1)
    timeout_seconds: float = 30.0
    proxy_url: Optional[str] = None

    # Deliver through a background thread pool instead of the caller's thread
    queued: bool = False

    @model_validator(mode="before")
    @classmethod
    def set_per_host_limit_from_pool_size(cls, values):
        """An unset per-host limit means the pool size."""
        if isinstance(values, dict):
            per_host = values.get("max_connections_per_host")
            if per_host is None or per_host == "":
                if "max_connections" in values:
                    values["max_connections_per_host"] = values["max_connections"]
                else:
                    values["max_connections_per_host"] = DEFAULT_MAX_CONNECTIONS
        return values

    @model_validator(mode="after")
    def clamp_per_host_limit(self):
        if self.max_connections_per_host > self.max_connections:
            self.max_connections_per_host = self.max_connections
        return self


settings = Settings()

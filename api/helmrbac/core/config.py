"""Settings for the Helm RBAC resolver service.

A ``Settings`` instance is built once when the application is created and
handed to the pieces that need it. Nothing in the package reads configuration
from module state.
"""

from enum import Enum
from typing import List, Optional, Tuple

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Environment(str, Enum):
    """Deployment stage the service runs in."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Resolver service settings, read from the environment and ``.env``."""

    app_name: str = "Helm RBAC Resolver"
    app_version: str = "0.1.0"
    environment: Environment = Field(Environment.DEVELOPMENT, env="ENVIRONMENT")
    debug: bool = Field(False, env="DEBUG")
    api_prefix: str = "/api/v1"

    # Caller identity forwarded by the OAuth proxy
    oauth_proxy_enabled: bool = Field(True, env="OAUTH_PROXY_ENABLED")
    oauth_header_user: str = Field("X-Forwarded-User", env="OAUTH_HEADER_USER")
    oauth_header_email: str = Field("X-Forwarded-Email", env="OAUTH_HEADER_EMAIL")
    oauth_header_groups: str = Field("X-Forwarded-Groups", env="OAUTH_HEADER_GROUPS")

    # Access checks on resolved object names
    rbac_enabled: bool = Field(True, env="RBAC_ENABLED")
    # Unresolved object names are denied unless this is turned off
    rbac_default_deny: bool = Field(True, env="RBAC_DEFAULT_DENY")

    # Record store
    redis_host: str = Field("redis", env="REDIS_HOST")
    redis_port: int = Field(6379, env="REDIS_PORT")
    redis_password: Optional[str] = Field(None, env="REDIS_PASSWORD")
    redis_db: int = Field(0, env="REDIS_DB")
    redis_url: Optional[str] = Field(None, env="REDIS_URL", validate_default=True)
    redis_socket_timeout: int = Field(5, env="REDIS_SOCKET_TIMEOUT")
    redis_max_connections: int = Field(50, env="REDIS_MAX_CONNECTIONS")

    log_level: LogLevel = Field(LogLevel.INFO, env="LOG_LEVEL")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s", env="LOG_FORMAT"
    )
    log_json: bool = Field(False, env="LOG_JSON")

    host: str = Field("0.0.0.0", env="HOST")
    port: int = Field(8080, env="PORT")
    reload: bool = Field(False, env="RELOAD")

    # Probe routes, served outside the API prefix
    health_check_path: str = "/health"
    readiness_check_path: str = "/ready"

    trusted_hosts: List[str] = Field(["localhost", "127.0.0.1"], env="TRUSTED_HOSTS")

    @validator("redis_url", pre=True)
    def build_redis_url(cls, v, values):
        """Build the Redis URL from its parts unless one is given."""
        if v:
            return v

        host = values.get("redis_host", "redis")
        port = values.get("redis_port", 6379)
        password = values.get("redis_password")
        db = values.get("redis_db", 0)

        auth = f":{password}@" if password else ""
        return f"redis://{auth}{host}:{port}/{db}"

    @validator("trusted_hosts", pre=True)
    def parse_trusted_hosts(cls, v):
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def probe_paths(self) -> Tuple[str, str]:
        return self.health_check_path, self.readiness_check_path

    class Config:
        """Pydantic config."""

        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

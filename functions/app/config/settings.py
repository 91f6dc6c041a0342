"""Settings for the function host, the queue worker and the console apps."""
from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

BLOG_BASE_ADDRESS = "https://blog.jepsen.ninja"
BLOG_USER_AGENT = "Blog.Jepsen.Ninja.Functions"


class NamedClientSettings(BaseModel):
    """One entry of NAMED_CLIENTS: base address plus default request headers."""

    base_address: str | None = None
    headers: dict[str, str] = Field(default_factory=dict)


def _default_named_clients() -> dict[str, NamedClientSettings]:
    return {
        "blog": NamedClientSettings(
            base_address=BLOG_BASE_ADDRESS,
            headers={"User-Agent": BLOG_USER_AGENT},
        ),
    }


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")
    log_serialize: bool = Field(False, validation_alias="LOG_SERIALIZE")

    # Default (unnamed) client. Empty user agent means no default headers.
    default_user_agent: str = Field("", validation_alias="DEFAULT_USER_AGENT")
    # JSON object: {"name": {"base_address": "...", "headers": {...}}}
    named_clients: dict[str, NamedClientSettings] = Field(
        default_factory=_default_named_clients,
        validation_alias="NAMED_CLIENTS",
    )
    blog_client_name: str = Field("blog", validation_alias="BLOG_CLIENT_NAME")
    injected_client_url: str = Field(BLOG_BASE_ADDRESS, validation_alias="INJECTED_CLIENT_URL")

    http_connect_timeout_seconds: float = Field(5.0, validation_alias="HTTP_CONNECT_TIMEOUT_SECONDS")
    http_read_timeout_seconds: float = Field(15.0, validation_alias="HTTP_READ_TIMEOUT_SECONDS")
    http_follow_redirects: bool = Field(True, validation_alias="HTTP_FOLLOW_REDIRECTS")

    avatar_client_name: str = Field("avatars", validation_alias="AVATAR_CLIENT_NAME")
    avatar_base_address: str = Field("https://robohash.org/", validation_alias="AVATAR_BASE_ADDRESS")
    avatar_path_template: str = Field("{profile_id}.png", validation_alias="AVATAR_PATH_TEMPLATE")
    avatar_blob_prefix: str = Field("avatars/", validation_alias="AVATAR_BLOB_PREFIX")

    storage_backend: str = Field("inmemory", validation_alias="STORAGE_BACKEND")
    database_host: str = Field("localhost", validation_alias="DATABASE_HOST")
    database_port: int = Field(27017, validation_alias="DATABASE_PORT")
    database_user: str = Field("", validation_alias="DATABASE_USER")
    database_password: str = Field("", validation_alias="DATABASE_PASSWORD")
    database_name: str = Field("functions", validation_alias="DATABASE_NAME")
    database_bucket: str = Field("avatars", validation_alias="DATABASE_BUCKET")
    database_connection_timeout_ms: int = Field(5000, validation_alias="DATABASE_CONNECTION_TIMEOUT_MS")

    consumer_backend: str = Field("rabbitmq", validation_alias="CONSUMER_BACKEND")
    broker_host: str = Field("localhost", validation_alias="BROKER_HOST")
    broker_port: int = Field(5672, validation_alias="BROKER_PORT")
    broker_user: str = Field("guest", validation_alias="BROKER_USER")
    broker_password: str = Field("guest", validation_alias="BROKER_PASSWORD")
    queue_name: str = Field("avatar-requests", validation_alias="QUEUE_NAME")
    prefetch_count: int = Field(10, validation_alias="PREFETCH_COUNT")

    host: str = Field("0.0.0.0", validation_alias="HOST")
    port: int = Field(7071, validation_alias="PORT")

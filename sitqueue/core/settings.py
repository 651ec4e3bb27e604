from typing import Literal

from anystore.settings import BaseSettings
from pydantic_settings import SettingsConfigDict

PayloadTier = Literal["file", "inline"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="sitqueue_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    uri: str = "data"
    """Queue store base uri, use `memory://` for a volatile (web) store"""

    payload_uri: str | None = None
    """Payload store base uri, defaults to `uri`"""

    payload_tier: PayloadTier = "file"
    """Store photos as separate files or keep them inline in the records"""

    add_attachment_allowance: int = 1
    """Pending AddAttachment records per collection and actor before blocking"""

    proximity_feet: float = 100.0
    """Minimum distance between a new sit and existing ones"""

    probe_host: str | None = None
    """Probe reachability of this host, otherwise connectivity is reported
    manually by the host application"""
    probe_port: int = 443
    probe_interval: float = 30.0  # seconds
    probe_timeout: float = 5.0  # seconds

    debug: bool = False
    log_level: str = "INFO"

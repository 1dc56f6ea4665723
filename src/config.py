"""Configuration for the application."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AutoSwitchConfig(BaseSettings):
    """Configuration for rule-based automatic switching."""

    model_config = SettingsConfigDict(env_prefix="AUTOSWITCH_", env_file=".env", extra="ignore")

    enabled: bool = Field(default=True, description="Enable rule-based auto-switch globally")
    interval_secs: int = Field(default=30, ge=1, description="Seconds between rule evaluation passes")
    regex_size_limit: int = Field(
        default=1024, ge=16, description="Maximum SSID pattern length accepted for compilation"
    )


class SchedulerConfig(BaseSettings):
    """Configuration for cron-style scheduled activation."""

    model_config = SettingsConfigDict(env_prefix="SCHEDULER_", env_file=".env", extra="ignore")

    enabled: bool = Field(default=True, description="Enable scheduled profile activation")
    interval_secs: int = Field(default=60, ge=1, description="Seconds between schedule checks")


class ProbeConfig(BaseSettings):
    """Configuration for live network probes."""

    model_config = SettingsConfigDict(env_prefix="PROBE_", env_file=".env", extra="ignore")

    timeout_secs: float = Field(default=5.0, gt=0, description="Timeout for each probe command")
    sysfs_root: str = Field(default="/sys/class/net", description="Root of per-interface sysfs entries")
    nmcli_path: str = Field(default="nmcli", description="NetworkManager CLI executable")
    ip_path: str = Field(default="ip", description="iproute2 executable")
    ping_path: str = Field(default="ping", description="ping executable")


class LoggingConfig(BaseSettings):
    """Configuration for log output."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: str = Field(default="INFO", description="Log level (TRACE, DEBUG, INFO, WARNING, ERROR)")
    file: str | None = Field(default=None, description="Optional log file path")
    rotation: str = Field(default="10 MB", description="Log file rotation threshold")
    retention: str = Field(default="7 days", description="How long rotated log files are kept")


class HistoryConfig(BaseSettings):
    """Configuration for the activation history."""

    model_config = SettingsConfigDict(env_prefix="HISTORY_", env_file=".env", extra="ignore")

    csv_path: str | None = Field(default=None, description="Append activations to this CSV file")
    buffer_size: int = Field(default=20, ge=1, description="Activations buffered before a CSV write")
    max_events: int = Field(default=1000, ge=1, description="Activations kept when no CSV file is set")


class ProfilesConfig(BaseSettings):
    """Configuration for the profile/schedule document."""

    model_config = SettingsConfigDict(env_prefix="PROFILES_", env_file=".env", extra="ignore")

    path: str = Field(default="profiles.json", description="Path to the profiles JSON document")


class AppConfig(BaseSettings):
    """Application configuration."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    autoswitch: AutoSwitchConfig = Field(default_factory=AutoSwitchConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    profiles: ProfilesConfig = Field(default_factory=ProfilesConfig)

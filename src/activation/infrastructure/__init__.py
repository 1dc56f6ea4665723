"""Infrastructure layer for automatic profile activation."""

from src.activation.infrastructure.activation_log import (
    CSVActivationLog,
    InMemoryActivationLog,
    create_activation_log,
)
from src.activation.infrastructure.clock import FixedClock, SystemClock
from src.activation.infrastructure.profile_source import FileProfileSource, StaticProfileSource
from src.activation.infrastructure.system_probe import SystemNetworkProbe

__all__ = [
    "CSVActivationLog",
    "InMemoryActivationLog",
    "create_activation_log",
    "FixedClock",
    "SystemClock",
    "FileProfileSource",
    "StaticProfileSource",
    "SystemNetworkProbe",
]

"""Automatic profile activation engine package."""

from src.activation.application import ActivationDispatcher, RuleEvaluator
from src.activation.domain import (
    ClockReading,
    DispatchConfig,
    Profile,
    RuleSet,
    Schedule,
    check_schedules,
)
from src.activation.infrastructure import (
    FileProfileSource,
    InMemoryActivationLog,
    StaticProfileSource,
    SystemClock,
    SystemNetworkProbe,
)

__all__ = [
    "ActivationDispatcher",
    "RuleEvaluator",
    "ClockReading",
    "DispatchConfig",
    "Profile",
    "RuleSet",
    "Schedule",
    "check_schedules",
    "FileProfileSource",
    "InMemoryActivationLog",
    "StaticProfileSource",
    "SystemClock",
    "SystemNetworkProbe",
]

"""Domain layer for automatic profile activation."""

from src.activation.domain.cron import check_schedules, matches_field, should_trigger
from src.activation.domain.exceptions import ActivationException, ProbeError, ProfileSourceError
from src.activation.domain.models import (
    ActivationDocument,
    ActivationEvent,
    ClockReading,
    Condition,
    DispatchConfig,
    GatewayMac,
    InterfaceState,
    InterfaceStateMatch,
    NetworkAvailable,
    Not,
    PingTarget,
    Profile,
    RuleOperator,
    RuleSet,
    Schedule,
    TimeWindow,
    Weekday,
    WifiSsid,
)
from src.activation.domain.protocols import ActivationLog, Clock, NetworkProbe, ProfileSource, ScheduleSource

__all__ = [
    "check_schedules",
    "matches_field",
    "should_trigger",
    "ActivationException",
    "ProbeError",
    "ProfileSourceError",
    "ActivationDocument",
    "ActivationEvent",
    "ClockReading",
    "Condition",
    "DispatchConfig",
    "GatewayMac",
    "InterfaceState",
    "InterfaceStateMatch",
    "NetworkAvailable",
    "Not",
    "PingTarget",
    "Profile",
    "RuleOperator",
    "RuleSet",
    "Schedule",
    "TimeWindow",
    "Weekday",
    "WifiSsid",
    "ActivationLog",
    "Clock",
    "NetworkProbe",
    "ProfileSource",
    "ScheduleSource",
]

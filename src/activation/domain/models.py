"""Domain models for automatic profile activation."""

from dataclasses import dataclass, field
from datetime import datetime, time
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class InterfaceStateMatch(str, Enum):
    """Network interface state for condition matching."""

    UP = "up"
    DOWN = "down"
    CARRIER = "carrier"
    NO_CARRIER = "nocarrier"


class RuleOperator(str, Enum):
    """How multiple conditions are combined."""

    AND = "and"
    OR = "or"


class Weekday(str, Enum):
    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @classmethod
    def from_cron_index(cls, index: int) -> "Weekday":
        """Convert a cron day-of-week (0=Sunday) to a Weekday."""
        return _CRON_WEEKDAYS[index % 7]


_CRON_WEEKDAYS = [Weekday.SUN, Weekday.MON, Weekday.TUE, Weekday.WED, Weekday.THU, Weekday.FRI, Weekday.SAT]


class WifiSsid(BaseModel):
    """Match the SSID of the active Wi-Fi network."""

    type: Literal["wifi_ssid"] = "wifi_ssid"
    ssid: str = Field(..., description="SSID to match (supports * globs unless regex is set)")
    regex: bool = Field(default=False, description="Treat ssid as a regular expression")

    def description(self) -> str:
        if self.regex:
            return f"Wi-Fi SSID matches: {self.ssid}"
        return f"Wi-Fi SSID: {self.ssid}"

    def icon_name(self) -> str:
        return "network-wireless-symbolic"


class GatewayMac(BaseModel):
    """Match the MAC address of the default gateway."""

    type: Literal["gateway_mac"] = "gateway_mac"
    mac: str

    def description(self) -> str:
        return f"Gateway MAC: {self.mac}"

    def icon_name(self) -> str:
        return "network-wired-symbolic"


class PingTarget(BaseModel):
    """Ping target is reachable."""

    type: Literal["ping_target"] = "ping_target"
    host: str
    timeout_ms: int = Field(default=1000, ge=0, description="Timeout in milliseconds")

    def description(self) -> str:
        return f"Ping: {self.host}"

    def icon_name(self) -> str:
        return "network-server-symbolic"


class InterfaceState(BaseModel):
    """Network interface is in the expected state."""

    type: Literal["interface_state"] = "interface_state"
    interface: str
    state: InterfaceStateMatch = InterfaceStateMatch.UP

    def description(self) -> str:
        return f"{self.interface} is {self.state.value}"

    def icon_name(self) -> str:
        return "network-wired-symbolic"


class TimeWindow(BaseModel):
    """
    Time-of-day window, optionally restricted to certain weekdays.

    A window whose start is later than its end wraps past midnight
    (e.g. 22:00 - 06:00).
    """

    type: Literal["time_window"] = "time_window"
    start: time
    end: time
    days: list[Weekday] = Field(default_factory=list, description="Days of week (empty = all days)")

    @field_validator("days", mode="before")
    @classmethod
    def _normalize_days(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [v.capitalize() if isinstance(v, str) else v for v in value]
        return value

    def is_active(self, now: time, today: Weekday) -> bool:
        """Check if the given time of day falls within this window."""
        if self.days and today not in self.days:
            return False

        if self.start <= self.end:
            return self.start <= now <= self.end

        # Overnight window
        return now >= self.start or now <= self.end

    def description(self) -> str:
        return f"Time: {self.start.strftime('%H:%M')} - {self.end.strftime('%H:%M')}"

    def icon_name(self) -> str:
        return "preferences-system-time-symbolic"


class NetworkAvailable(BaseModel):
    """Any network connectivity is available."""

    type: Literal["network_available"] = "network_available"

    def description(self) -> str:
        return "Network available"

    def icon_name(self) -> str:
        return "network-transmit-receive-symbolic"


class Not(BaseModel):
    """Negation of another condition."""

    type: Literal["not"] = "not"
    condition: "Condition"

    def description(self) -> str:
        return f"NOT ({self.condition.description()})"

    def icon_name(self) -> str:
        return "dialog-error-symbolic"


Condition = Annotated[
    Union[WifiSsid, GatewayMac, PingTarget, InterfaceState, TimeWindow, NetworkAvailable, Not],
    Field(discriminator="type"),
]

Not.model_rebuild()


class RuleSet(BaseModel):
    """A set of conditions combined with an operator."""

    operator: RuleOperator = RuleOperator.AND
    conditions: list[Condition] = Field(default_factory=list)
    enabled: bool = Field(default=True, description="Enable auto-switch for this profile")
    priority: int = Field(default=0, description="Higher priority rule sets are evaluated first")

    def add_condition(self, condition: Condition) -> None:
        self.conditions.append(condition)

    def is_empty(self) -> bool:
        return not self.conditions

    def __len__(self) -> int:
        return len(self.conditions)


class Schedule(BaseModel):
    """Cron-style scheduled profile activation."""

    id: str
    profile_id: str
    cron_expression: str = Field(..., description="minute hour day-of-month month day-of-week")
    enabled: bool = True
    one_shot: bool = Field(default=False, description="Fire once per engine lifetime")
    description: str | None = None


class Profile(BaseModel):
    """
    The slice of a profile the activation engine reads.

    Profiles are owned by the persistence layer; any extra keys it stores
    (actions, metadata) are ignored here.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    name: str = ""
    auto_switch_rules: RuleSet | None = None

    def has_auto_switch(self) -> bool:
        return self.auto_switch_rules is not None and not self.auto_switch_rules.is_empty()

    @property
    def display_name(self) -> str:
        return self.name or self.id


class ActivationDocument(BaseModel):
    """File-level document holding profiles and schedules."""

    model_config = ConfigDict(extra="ignore")

    profiles: list[Profile] = Field(default_factory=list)
    schedules: list[Schedule] = Field(default_factory=list)


@dataclass(frozen=True)
class ClockReading:
    """Wall-clock components used by schedules and time windows."""

    minute: int
    hour: int
    day_of_month: int
    month: int
    weekday: int  # 0=Sunday
    time_of_day: time

    @classmethod
    def from_datetime(cls, value: datetime) -> "ClockReading":
        return cls(
            minute=value.minute,
            hour=value.hour,
            day_of_month=value.day,
            month=value.month,
            weekday=value.isoweekday() % 7,
            time_of_day=value.time().replace(microsecond=0),
        )

    @property
    def weekday_name(self) -> Weekday:
        return Weekday.from_cron_index(self.weekday)


@dataclass(frozen=True)
class NetworkSnapshot:
    """Network state captured once at the start of an evaluation pass."""

    ssid: str | None = None
    gateway_mac: str | None = None


@dataclass(frozen=True)
class InterfaceReading:
    """Raw per-interface state as read from the operating system."""

    operstate: str | None = None
    carrier: str | None = None  # raw sysfs value, "1" or "0"; None if unreadable


@dataclass
class ConditionResult:
    """Result of evaluating a single condition."""

    condition: Any
    matched: bool
    detail: str | None = None


@dataclass
class RuleEvaluationResult:
    """Result of evaluating a rule set with every condition reported."""

    matched: bool
    condition_results: list[ConditionResult] = field(default_factory=list)
    duration_ms: float = 0.0


@dataclass
class ActivationEvent:
    """Represents a profile activation requested by the engine."""

    timestamp: datetime
    profile_id: str
    source: str  # "schedule" or "rules"
    schedule_id: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for DataFrame/storage."""
        return {
            "timestamp": self.timestamp,
            "profile_id": self.profile_id,
            "source": self.source,
            "schedule_id": self.schedule_id,
        }


@dataclass
class DispatchConfig:
    """Configuration for ActivationDispatcher."""

    schedule_interval_secs: float = 60  # Schedule check cadence
    rule_interval_secs: float = 30  # Rule evaluation cadence
    scheduling_enabled: bool = True
    auto_switch_enabled: bool = True

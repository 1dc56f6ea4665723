"""Protocols (interfaces) for activation engine collaborators."""

from typing import Protocol

import pandas as pd

from src.activation.domain.models import (
    ActivationEvent,
    ClockReading,
    InterfaceReading,
    Profile,
    Schedule,
)


class NetworkProbe(Protocol):
    """Interface for live (possibly slow) reads of network state."""

    def current_ssid(self) -> str | None:
        """Return the SSID of the active Wi-Fi connection, or None."""
        ...

    def current_gateway_mac(self) -> str | None:
        """Return the MAC address of the default gateway, or None."""
        ...

    def ping(self, host: str, timeout_secs: int) -> bool:
        """
        Probe reachability of a host.

        Args:
            host: Hostname or IP address
            timeout_secs: Maximum time to wait for a reply

        Returns:
            True if the host answered within the timeout
        """
        ...

    def interface_state(self, name: str) -> InterfaceReading | None:
        """Read operational and carrier state of an interface, or None if unknown."""
        ...

    def is_network_available(self) -> bool:
        """Return True if any network connectivity is active."""
        ...


class Clock(Protocol):
    """Interface for reading wall-clock time."""

    def now(self) -> ClockReading:
        ...


class ProfileSource(Protocol):
    """Interface for the current list of profiles."""

    def current_profiles(self) -> list[Profile]:
        ...


class ScheduleSource(Protocol):
    """Interface for the current list of schedules."""

    def current_schedules(self) -> list[Schedule]:
        ...


class ActivationLog(Protocol):
    """Interface for recording activation events."""

    def record(self, event: ActivationEvent) -> None:
        """Record a single event."""
        ...

    def flush(self) -> None:
        """Persist anything still buffered."""
        ...

    def to_dataframe(self) -> pd.DataFrame:
        """Convert recorded events to DataFrame."""
        ...

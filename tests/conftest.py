from datetime import datetime

import pytest

from src.activation.application.rule_evaluator import RuleEvaluator
from src.activation.domain.models import InterfaceReading, Profile, RuleSet
from src.activation.infrastructure.clock import FixedClock


class FakeNetworkProbe:
    """NetworkProbe with scripted answers and call counters."""

    def __init__(self):
        self.ssid: str | None = None
        self.gateway_mac: str | None = None
        self.reachable: set[str] = set()
        self.interfaces: dict[str, InterfaceReading] = {}
        self.network_available = False
        self.failing: set[str] = set()
        self.calls: dict[str, int] = {}
        self.ping_timeouts: list[int] = []

    def _called(self, name):
        self.calls[name] = self.calls.get(name, 0) + 1
        if name in self.failing:
            raise RuntimeError(f"{name} exploded")

    def current_ssid(self):
        self._called("current_ssid")
        return self.ssid

    def current_gateway_mac(self):
        self._called("current_gateway_mac")
        return self.gateway_mac

    def ping(self, host, timeout_secs):
        self._called("ping")
        self.ping_timeouts.append(timeout_secs)
        return host in self.reachable

    def interface_state(self, name):
        self._called("interface_state")
        return self.interfaces.get(name)

    def is_network_available(self):
        self._called("is_network_available")
        return self.network_available


@pytest.fixture
def probe():
    return FakeNetworkProbe()


@pytest.fixture
def clock():
    # Tuesday
    return FixedClock(datetime(2026, 3, 10, 9, 30))


@pytest.fixture
def evaluator(probe, clock):
    return RuleEvaluator(probe=probe, clock=clock)


@pytest.fixture
def make_profile():
    def _make_profile(profile_id, conditions, operator="and", priority=0, enabled=True):
        return Profile(
            id=profile_id,
            name=profile_id.title(),
            auto_switch_rules=RuleSet(
                operator=operator, conditions=conditions, priority=priority, enabled=enabled
            ),
        )

    return _make_profile

"""Rule evaluator: picks the profile whose auto-switch rules match live network state."""

import re
import time
from collections.abc import Callable, Sequence
from typing import TypeVar

from loguru import logger

from src.activation.domain.models import (
    ClockReading,
    Condition,
    ConditionResult,
    GatewayMac,
    InterfaceReading,
    InterfaceState,
    InterfaceStateMatch,
    NetworkAvailable,
    NetworkSnapshot,
    Not,
    PingTarget,
    Profile,
    RuleEvaluationResult,
    RuleOperator,
    RuleSet,
    TimeWindow,
    WifiSsid,
)
from src.activation.domain.protocols import Clock, NetworkProbe

# Upper bound on pattern source length. Python's re has no compiled-size
# limit, so this rejects oversized patterns but does not make matching
# linear-time.
REGEX_SIZE_LIMIT = 1 << 10

T = TypeVar("T")


class RuleEvaluator:
    """
    Evaluates auto-switch rule sets against live network state.

    Holds a per-instance regex cache, the network snapshot of the current
    pass and the id of the last profile it selected. Not thread-safe: exactly
    one worker may use an instance at a time.
    """

    def __init__(self, probe: NetworkProbe, clock: Clock, regex_size_limit: int = REGEX_SIZE_LIMIT):
        """
        Initialize rule evaluator.

        Args:
            probe: Source of live network state
            clock: Source of wall-clock time for time windows
            regex_size_limit: Maximum accepted SSID pattern length
        """
        self.probe = probe
        self.clock = clock
        self.regex_size_limit = regex_size_limit

        self._regex_cache: dict[str, re.Pattern[str]] = {}
        self._snapshot = NetworkSnapshot()
        self._pass_time: ClockReading | None = None
        self._last_profile_id: str | None = None

    @property
    def last_profile_id(self) -> str | None:
        return self._last_profile_id

    @property
    def snapshot(self) -> NetworkSnapshot:
        return self._snapshot

    def evaluate_profiles(self, profiles: Sequence[Profile]) -> str | None:
        """
        Evaluate all profiles and return the ID of the first matching one.

        Profiles are tried in descending rule priority (ties keep input
        order). Returns None when nothing matches or when the winner is the
        profile this evaluator already selected.

        Blocks on network probes; never call from an interactive thread.
        """
        self.refresh_network_state()
        self._pass_time = self.clock.now()

        try:
            candidates = [
                p
                for p in profiles
                if p.auto_switch_rules is not None
                and p.auto_switch_rules.enabled
                and not p.auto_switch_rules.is_empty()
            ]
            candidates.sort(key=lambda p: -p.auto_switch_rules.priority)

            for profile in candidates:
                if not self.evaluate_ruleset(profile.auto_switch_rules):
                    continue

                if profile.id == self._last_profile_id:
                    logger.debug(f"Profile '{profile.display_name}' already active, skipping")
                    return None

                logger.info(f"Auto-switch: profile '{profile.display_name}' matches rules")
                self._last_profile_id = profile.id
                return profile.id

            return None
        finally:
            self._pass_time = None

    def evaluate_ruleset(self, rules: RuleSet) -> bool:
        """Evaluate a rule set, short-circuiting on the operator."""
        if rules.is_empty():
            return False

        if rules.operator == RuleOperator.AND:
            return all(self.evaluate_condition(c) for c in rules.conditions)
        return any(self.evaluate_condition(c) for c in rules.conditions)

    def explain_ruleset(self, rules: RuleSet, refresh: bool = True) -> RuleEvaluationResult:
        """
        Evaluate every condition of a rule set and report each result.

        Unlike evaluate_ruleset this never short-circuits, so every probe in
        the rule set runs. Intended for diagnostics.

        Args:
            rules: Rule set to explain
            refresh: Refresh the network snapshot first

        Returns:
            Combined result plus per-condition results and duration
        """
        if refresh:
            self.refresh_network_state()

        started = time.perf_counter()
        results = [
            ConditionResult(condition=c, matched=self.evaluate_condition(c), detail=c.description())
            for c in rules.conditions
        ]

        if not results:
            matched = False
        elif rules.operator == RuleOperator.AND:
            matched = all(r.matched for r in results)
        else:
            matched = any(r.matched for r in results)

        return RuleEvaluationResult(
            matched=matched,
            condition_results=results,
            duration_ms=(time.perf_counter() - started) * 1000,
        )

    def evaluate_condition(self, condition: Condition) -> bool:
        """Evaluate a single condition."""
        if isinstance(condition, WifiSsid):
            return self._check_wifi_ssid(condition)
        elif isinstance(condition, GatewayMac):
            return self._check_gateway_mac(condition)
        elif isinstance(condition, PingTarget):
            return self._check_ping(condition)
        elif isinstance(condition, InterfaceState):
            return self._check_interface_state(condition)
        elif isinstance(condition, TimeWindow):
            now = self._pass_time or self.clock.now()
            return condition.is_active(now.time_of_day, now.weekday_name)
        elif isinstance(condition, NetworkAvailable):
            return self._safe_probe("network availability", self.probe.is_network_available, False)
        elif isinstance(condition, Not):
            return not self.evaluate_condition(condition.condition)

        logger.warning(f"Unknown condition type {type(condition).__name__}, treating as non-matching")
        return False

    def refresh_network_state(self) -> NetworkSnapshot:
        """Capture SSID and gateway MAC once for the coming evaluation pass."""
        ssid = self._safe_probe("SSID", self.probe.current_ssid, None)
        mac = self._safe_probe("gateway MAC", self.probe.current_gateway_mac, None)

        self._snapshot = NetworkSnapshot(ssid=ssid, gateway_mac=mac.lower() if mac else None)
        logger.debug(f"Network state: ssid={self._snapshot.ssid!r}, gateway={self._snapshot.gateway_mac!r}")
        return self._snapshot

    def clear_memory(self) -> None:
        """Forget the last selected profile and drop compiled patterns (after a manual switch)."""
        self._last_profile_id = None
        self._regex_cache.clear()
        logger.debug("Cleared auto-switch memory")

    def _get_or_compile_regex(self, pattern: str) -> re.Pattern[str] | None:
        """Get or compile a regex, using the cache and applying the size limit."""
        cached = self._regex_cache.get(pattern)
        if cached is not None:
            return cached

        if len(pattern) > self.regex_size_limit:
            logger.warning(
                f"Regex of {len(pattern)} chars exceeds limit of {self.regex_size_limit}, "
                "treating condition as non-matching"
            )
            return None

        try:
            compiled = re.compile(pattern)
        except (re.error, OverflowError, RecursionError) as e:
            logger.warning(f"Failed to compile regex '{pattern}': {e}")
            return None

        self._regex_cache[pattern] = compiled
        return compiled

    def _check_wifi_ssid(self, condition: WifiSsid) -> bool:
        current = self._snapshot.ssid
        if current is None:
            return False

        if condition.regex:
            pattern = self._get_or_compile_regex(condition.ssid)
        elif "*" in condition.ssid:
            glob = ".*".join(re.escape(part) for part in condition.ssid.split("*"))
            pattern = self._get_or_compile_regex(f"^{glob}$")
        else:
            return current == condition.ssid

        return pattern is not None and pattern.fullmatch(current) is not None

    def _check_gateway_mac(self, condition: GatewayMac) -> bool:
        current = self._snapshot.gateway_mac
        return current is not None and current.lower() == condition.mac.lower()

    def _check_ping(self, condition: PingTarget) -> bool:
        timeout_secs = max(1, condition.timeout_ms // 1000)
        return self._safe_probe(
            f"ping {condition.host}", lambda: self.probe.ping(condition.host, timeout_secs), False
        )

    def _check_interface_state(self, condition: InterfaceState) -> bool:
        reading: InterfaceReading | None = self._safe_probe(
            f"interface {condition.interface}",
            lambda: self.probe.interface_state(condition.interface),
            None,
        )
        operstate = reading.operstate if reading else None
        carrier = reading.carrier if reading else None

        if condition.state == InterfaceStateMatch.UP:
            return operstate == "up"
        elif condition.state == InterfaceStateMatch.DOWN:
            return operstate == "down"
        elif condition.state == InterfaceStateMatch.CARRIER:
            return carrier == "1"
        # Unreadable carrier counts as no carrier
        return carrier is None or carrier == "0"

    def _safe_probe(self, name: str, probe: Callable[[], T], default: T) -> T:
        """Run a probe, resolving any failure to the given default."""
        try:
            return probe()
        except Exception as e:
            logger.warning(f"Probe '{name}' failed: {e}")
            return default

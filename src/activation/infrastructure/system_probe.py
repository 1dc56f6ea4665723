"""Linux implementation of NetworkProbe using NetworkManager, iproute2, ping and sysfs."""

import re
import subprocess
from pathlib import Path

from loguru import logger

from src.activation.domain.exceptions import ProbeError
from src.activation.domain.models import InterfaceReading
from src.activation.domain.protocols import NetworkProbe

# Hostnames, IPv4 and IPv6 literals; never starts with '-' so it can't be read as an option
_HOST_PATTERN = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9.:\-]{0,252}[A-Za-z0-9])?$")
_INTERFACE_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.:@\-]{0,14}$")


class SystemNetworkProbe(NetworkProbe):
    """
    Reads live network state from the local system.

    Every command runs with a timeout. Command failures raise ProbeError,
    which the rule evaluator resolves to a non-matching condition.
    """

    def __init__(
        self,
        timeout_secs: float = 5.0,
        sysfs_root: str = "/sys/class/net",
        nmcli_path: str = "nmcli",
        ip_path: str = "ip",
        ping_path: str = "ping",
    ):
        self.timeout_secs = timeout_secs
        self.sysfs_root = Path(sysfs_root)
        self.nmcli_path = nmcli_path
        self.ip_path = ip_path
        self.ping_path = ping_path

    def current_ssid(self) -> str | None:
        """Get the SSID of the active Wi-Fi network via nmcli."""
        result = self._run([self.nmcli_path, "-t", "-f", "active,ssid", "dev", "wifi"])

        for line in result.stdout.splitlines():
            if line.startswith("yes:"):
                # nmcli terse mode escapes ':' inside values
                return line[len("yes:"):].replace("\\:", ":")
        return None

    def current_gateway_mac(self) -> str | None:
        """Get the default gateway's MAC address from the neighbour table."""
        route = self._run([self.ip_path, "route", "show", "default"])
        lines = route.stdout.splitlines()
        if not lines:
            return None

        tokens = lines[0].split()
        if len(tokens) < 3:
            return None
        gateway_ip = tokens[2]

        neigh = self._run([self.ip_path, "neigh", "show", gateway_ip])
        lines = neigh.stdout.splitlines()
        if not lines:
            return None

        tokens = lines[0].split()
        if len(tokens) < 5:
            return None
        return tokens[4].lower()

    def ping(self, host: str, timeout_secs: int) -> bool:
        """Send a single ICMP echo request."""
        if not _HOST_PATTERN.match(host):
            logger.warning(f"Refusing to ping invalid host '{host}'")
            return False

        result = self._run(
            [self.ping_path, "-c", "1", "-W", str(timeout_secs), host],
            timeout=timeout_secs + 1,
        )
        return result.returncode == 0

    def interface_state(self, name: str) -> InterfaceReading | None:
        """Read operstate and carrier from sysfs."""
        if not _INTERFACE_PATTERN.match(name):
            logger.warning(f"Invalid interface name '{name}'")
            return None

        base = self.sysfs_root / name
        operstate = self._read_sysfs(base / "operstate")
        carrier_raw = self._read_sysfs(base / "carrier")
        if operstate is None and carrier_raw is None:
            return None

        return InterfaceReading(operstate=operstate, carrier=carrier_raw)

    def is_network_available(self) -> bool:
        """Check NetworkManager's overall connectivity state."""
        result = self._run([self.nmcli_path, "-t", "-f", "STATE", "general", "status"])
        if result.returncode != 0:
            return False

        lines = result.stdout.splitlines()
        # "connected", "connected (site only)", "connected (local only)"
        return bool(lines) and lines[0].strip().startswith("connected")

    def _run(self, args: list[str], timeout: float | None = None) -> subprocess.CompletedProcess:
        try:
            return subprocess.run(
                args,
                capture_output=True,
                text=True,
                timeout=timeout or self.timeout_secs,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ProbeError(args[0], f"timed out after {e.timeout}s") from e
        except OSError as e:
            raise ProbeError(args[0], str(e)) from e

    @staticmethod
    def _read_sysfs(path: Path) -> str | None:
        try:
            return path.read_text().strip()
        except OSError:
            return None

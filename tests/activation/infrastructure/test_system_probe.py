"""Tests for the Linux network probe, with subprocess and sysfs faked."""

import subprocess

import pytest

from src.activation.domain.exceptions import ProbeError
from src.activation.domain.models import InterfaceReading
from src.activation.infrastructure import system_probe
from src.activation.infrastructure.system_probe import SystemNetworkProbe


class FakeRun:
    """Stands in for subprocess.run, answering by command prefix."""

    def __init__(self):
        self.responses: dict[tuple[str, ...], tuple[int, str]] = {}
        self.calls: list[tuple[list[str], float]] = []
        self.error: Exception | None = None

    def __call__(self, args, capture_output, text, timeout, check):
        self.calls.append((args, timeout))
        if self.error is not None:
            raise self.error
        for prefix, (returncode, stdout) in self.responses.items():
            if tuple(args[: len(prefix)]) == prefix:
                return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr="")
        return subprocess.CompletedProcess(args, 1, stdout="", stderr="")


@pytest.fixture
def fake_run(monkeypatch):
    fake = FakeRun()
    monkeypatch.setattr(system_probe.subprocess, "run", fake)
    return fake


@pytest.fixture
def sysfs(tmp_path):
    return tmp_path / "net"


@pytest.fixture
def system(sysfs):
    return SystemNetworkProbe(timeout_secs=3.0, sysfs_root=str(sysfs))


def make_interface(sysfs, name, operstate=None, carrier=None):
    path = sysfs / name
    path.mkdir(parents=True)
    if operstate is not None:
        (path / "operstate").write_text(f"{operstate}\n")
    if carrier is not None:
        (path / "carrier").write_text(f"{carrier}\n")


class TestCurrentSsid:
    def test_active_network(self, system, fake_run):
        fake_run.responses[("nmcli",)] = (0, "no:Neighbour\nyes:Office-5G\nno:Cafe\n")
        assert system.current_ssid() == "Office-5G"
        assert fake_run.calls[0] == (["nmcli", "-t", "-f", "active,ssid", "dev", "wifi"], 3.0)

    def test_escaped_colon(self, system, fake_run):
        fake_run.responses[("nmcli",)] = (0, "yes:Lab\\:2\n")
        assert system.current_ssid() == "Lab:2"

    def test_not_connected(self, system, fake_run):
        fake_run.responses[("nmcli",)] = (0, "no:Neighbour\n")
        assert system.current_ssid() is None

    def test_nmcli_missing(self, system, fake_run):
        fake_run.error = FileNotFoundError("nmcli")
        with pytest.raises(ProbeError):
            system.current_ssid()

    def test_timeout(self, system, fake_run):
        fake_run.error = subprocess.TimeoutExpired(["nmcli"], 3.0)
        with pytest.raises(ProbeError) as exc_info:
            system.current_ssid()
        assert exc_info.value.details == {"probe": "nmcli"}


class TestGatewayMac:
    def test_resolves_gateway(self, system, fake_run):
        fake_run.responses[("ip", "route")] = (0, "default via 192.168.1.1 dev wlan0 proto dhcp metric 600\n")
        fake_run.responses[("ip", "neigh")] = (0, "192.168.1.1 dev wlan0 lladdr AA:BB:CC:DD:EE:FF REACHABLE\n")

        assert system.current_gateway_mac() == "aa:bb:cc:dd:ee:ff"
        assert fake_run.calls[1][0] == ["ip", "neigh", "show", "192.168.1.1"]

    def test_no_default_route(self, system, fake_run):
        fake_run.responses[("ip", "route")] = (0, "")
        assert system.current_gateway_mac() is None
        assert len(fake_run.calls) == 1

    def test_incomplete_neighbour(self, system, fake_run):
        fake_run.responses[("ip", "route")] = (0, "default via 10.0.0.1 dev eth0\n")
        fake_run.responses[("ip", "neigh")] = (0, "10.0.0.1 dev eth0 FAILED\n")
        assert system.current_gateway_mac() is None


class TestPing:
    def test_reachable(self, system, fake_run):
        fake_run.responses[("ping",)] = (0, "")
        assert system.ping("10.0.0.1", 2)
        assert fake_run.calls[0] == (["ping", "-c", "1", "-W", "2", "10.0.0.1"], 3)

    def test_unreachable(self, system, fake_run):
        fake_run.responses[("ping",)] = (1, "")
        assert not system.ping("offline.example", 1)

    @pytest.mark.parametrize("host", ["-f", "host name", "a;rm -rf /", ""])
    def test_invalid_host_is_not_pinged(self, system, fake_run, host):
        assert not system.ping(host, 1)
        assert fake_run.calls == []

    def test_ipv6_literal(self, system, fake_run):
        fake_run.responses[("ping",)] = (0, "")
        assert system.ping("fe80::1", 1)


class TestInterfaceState:
    def test_up_with_carrier(self, system, sysfs):
        make_interface(sysfs, "eth0", "up", "1")
        assert system.interface_state("eth0") == InterfaceReading(operstate="up", carrier="1")

    def test_down_without_carrier(self, system, sysfs):
        make_interface(sysfs, "eth0", "down", "0")
        assert system.interface_state("eth0") == InterfaceReading(operstate="down", carrier="0")

    def test_unreadable_carrier(self, system, sysfs):
        make_interface(sysfs, "wlan0", "dormant")
        assert system.interface_state("wlan0") == InterfaceReading(operstate="dormant", carrier=None)

    def test_unexpected_carrier_value_is_kept(self, system, sysfs):
        make_interface(sysfs, "eth1", "up", "2")
        assert system.interface_state("eth1") == InterfaceReading(operstate="up", carrier="2")

    def test_missing_interface(self, system):
        assert system.interface_state("eth9") is None

    @pytest.mark.parametrize("name", ["../etc", "eth0/carrier", "", "a" * 20])
    def test_invalid_name(self, system, name):
        assert system.interface_state(name) is None


class TestNetworkAvailable:
    @pytest.mark.parametrize(
        "output, expected",
        [
            ("connected\n", True),
            ("connected (site only)\n", True),
            ("disconnected\n", False),
            ("connecting\n", False),
            ("asleep\n", False),
            ("", False),
        ],
    )
    def test_states(self, system, fake_run, output, expected):
        fake_run.responses[("nmcli",)] = (0, output)
        assert system.is_network_available() is expected

    def test_command_failure(self, system, fake_run):
        fake_run.responses[("nmcli",)] = (8, "connected\n")
        assert not system.is_network_available()

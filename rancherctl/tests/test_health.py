from pathlib import Path

import pytest

from rancherctl.errors import ReadinessTimeoutError
from rancherctl.modules.rke2.health import wait_for_api


class ClockProbe:
    """Becomes ready once the fake clock reaches ``ready_at`` seconds."""

    def __init__(self, ready_at=None, kubeconfig_at=0):
        self.kubeconfig = Path("/tmp/kubeconfig")
        self.now = 0
        self.ready_at = ready_at
        self.kubeconfig_at = kubeconfig_at
        self.checks = 0

    def sleep(self, seconds):
        self.now += seconds

    def kubeconfig_exists(self):
        self.checks += 1
        return self.now >= self.kubeconfig_at

    def api_ready(self):
        return self.ready_at is not None and self.now >= self.ready_at


def test_ready_immediately():
    probe = ClockProbe(ready_at=0)
    assert wait_for_api(probe, interval=3, max_wait=300, sleep=probe.sleep) == 0
    assert probe.checks == 1


def test_ready_after_some_seconds():
    probe = ClockProbe(ready_at=10)
    assert wait_for_api(probe, interval=3, max_wait=300, sleep=probe.sleep) == 12
    assert probe.now == 12


def test_waits_for_kubeconfig_file():
    probe = ClockProbe(ready_at=0, kubeconfig_at=30)
    assert wait_for_api(probe, interval=3, max_wait=300, sleep=probe.sleep) == 30


def test_ready_exactly_at_ceiling():
    probe = ClockProbe(ready_at=300)
    assert wait_for_api(probe, interval=3, max_wait=300, sleep=probe.sleep) == 300


def test_times_out_at_ceiling():
    probe = ClockProbe(ready_at=None)

    with pytest.raises(ReadinessTimeoutError) as exc:
        wait_for_api(probe, interval=3, max_wait=300, sleep=probe.sleep)

    # checks at 0, 3, ..., 300 and no sleep after the last one
    assert probe.now == 300
    assert probe.checks == 101
    assert "journalctl" in str(exc.value)


def test_never_ready_just_past_ceiling():
    probe = ClockProbe(ready_at=303)
    with pytest.raises(ReadinessTimeoutError):
        wait_for_api(probe, interval=3, max_wait=300, sleep=probe.sleep)
    assert probe.now == 300


def test_last_wait_is_shortened_to_ceiling():
    probe = ClockProbe(ready_at=None)

    with pytest.raises(ReadinessTimeoutError):
        wait_for_api(probe, interval=7, max_wait=10, sleep=probe.sleep)

    # checks at 0, 7, 10
    assert probe.now == 10
    assert probe.checks == 3


def test_ready_at_uneven_ceiling():
    probe = ClockProbe(ready_at=10)
    assert wait_for_api(probe, interval=7, max_wait=10, sleep=probe.sleep) == 10

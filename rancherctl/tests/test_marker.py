import pytest

from rancherctl.errors import MarkerFormatError, MarkerNotFoundError
from rancherctl.marker import marker_exists, parse_marker, read_marker, write_marker
from rancherctl.models import RunState
from conftest import FakeHost

MARKER = """\
installed_by=rancherctl
version=1.0.0
arch=x86_64
date=2026-10-16T10:00:00+00:00
rke2=true
helm=false
clusterctl=true
rancher=true
"""


def test_parse_marker():
    record = parse_marker(MARKER)
    assert record.installed_by == "rancherctl"
    assert record.arch == "x86_64"
    assert record.rke2 is True
    assert record.helm is False
    assert record.clusterctl is True
    assert record.rancher is True


def test_parse_ignores_unknown_keys_and_comments():
    record = parse_marker("# written by hand\n" + MARKER + "\nextra=1\n")
    assert record.version == "1.0.0"


def test_marker_content_is_never_executed(tmp_path):
    canary = tmp_path / "canary"
    text = MARKER.replace("version=1.0.0", f"version=$(touch {canary})")
    record = parse_marker(text)
    assert record.version == f"$(touch {canary})"
    assert not canary.exists()


@pytest.mark.parametrize("text", [
    MARKER.replace("rke2=true", "rke2=yes"),
    MARKER.replace("helm=false", "helm=1"),
    MARKER + "not a key value line\n",
    MARKER.replace("installed_by=rancherctl\n", ""),
])
def test_parse_rejects_malformed(text):
    with pytest.raises(MarkerFormatError):
        parse_marker(text)


def test_read_missing_marker(tmp_path):
    with pytest.raises(MarkerNotFoundError):
        read_marker(tmp_path / "missing.meta")


def test_round_trip_through_file(tmp_path):
    path = tmp_path / "setup.meta"
    record = RunState(rke2=True, rancher=True).to_record("rancherctl", "1.0.0", "aarch64")
    path.write_text(record.to_lines())

    assert marker_exists(path)
    assert read_marker(path) == record


def test_record_lines_order():
    record = RunState(helm=True).to_record("rancherctl", "1.0.0", "x86_64", date="2026-10-16T10:00:00+00:00")
    assert record.to_lines().splitlines() == [
        "installed_by=rancherctl",
        "version=1.0.0",
        "arch=x86_64",
        "date=2026-10-16T10:00:00+00:00",
        "rke2=false",
        "helm=true",
        "clusterctl=false",
        "rancher=false",
    ]


def test_write_marker_skipped_in_dry_run(tmp_path):
    path = tmp_path / "setup.meta"
    host = FakeHost(dry_run=True)
    write_marker(host, RunState().to_record("rancherctl", "1.0.0", "x86_64"), path)
    assert not path.exists()
    assert host.files == {}


def test_write_marker(tmp_path):
    path = tmp_path / "setup.meta"
    host = FakeHost()
    write_marker(host, RunState(rke2=True).to_record("rancherctl", "1.0.0", "x86_64"), path)
    assert "rke2=true" in host.files[path]

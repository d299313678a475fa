"""Install marker persistence.

The marker is a plain ``key=value`` file. It is parsed line by line and
never executed.
"""
import logging
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from .config import Config
from .errors import MarkerFormatError, MarkerNotFoundError
from .models import InstallRecord

logger = logging.getLogger("rancherctl.marker")

BOOLEAN_KEYS = ('rke2', 'helm', 'clusterctl', 'rancher')


def marker_exists(path: Optional[Path] = None) -> bool:
    return Path(path or Config.MARKER_PATH).is_file()


def parse_marker(text: str) -> InstallRecord:
    """Parse marker contents into an InstallRecord.

    Raises:
        MarkerFormatError: on a line without ``=``, a non true/false flag,
            or a missing required field.
    """
    values: Dict[str, str] = {}
    for lineno, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith('#'):
            continue
        key, sep, value = line.partition('=')
        key = key.strip()
        if not sep or not key:
            raise MarkerFormatError(f"Invalid marker line {lineno}: {raw!r}")
        if key not in InstallRecord.model_fields:
            logger.debug(f"Ignoring unknown marker key: {key}")
            continue
        value = value.strip()
        if key in BOOLEAN_KEYS and value not in ('true', 'false'):
            raise MarkerFormatError(f"Invalid value for {key}: {value!r} (expected true or false)")
        values[key] = value

    try:
        return InstallRecord(**values)
    except ValidationError as e:
        raise MarkerFormatError(f"Invalid install marker: {e}") from e


def read_marker(path: Optional[Path] = None) -> InstallRecord:
    path = Path(path or Config.MARKER_PATH)
    if not path.is_file():
        raise MarkerNotFoundError("Install marker not found. Aborting to avoid unintended removal.")
    logger.info(f"Reading install marker from {path}")
    return parse_marker(path.read_text())


def write_marker(host, record: InstallRecord, path: Optional[Path] = None) -> None:
    """Write the marker through ``host``. Does nothing in dry-run mode."""
    if host.dry_run:
        return
    path = Path(path or Config.MARKER_PATH)
    logger.info(f"Writing install marker to {path}")
    host.write_file(path, record.to_lines(), mode=0o644)

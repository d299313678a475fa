"""Utility functions and helpers for the rancherctl application."""
import logging
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional, Sequence

from ..config import Config
from ..errors import CommandError

logger = logging.getLogger("rancherctl.utils")


def redact_command(cmd: Sequence[str]) -> str:
    """Render a command for logging with ``key=secret`` arguments masked."""
    parts = []
    for arg in cmd:
        key, sep, _ = str(arg).partition('=')
        if sep and any(k in key.lower() for k in Config.REDACT_KEYS):
            arg = f"{key}=[REDACTED]"
        parts.append(str(arg))
    return ' '.join(parts)


def run_command(
    cmd: List[str],
    *,
    check: bool = True,
    capture_output: bool = False,
    input: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Path] = None,
) -> subprocess.CompletedProcess:
    cmd_str = redact_command(cmd)
    logger.debug(f"💻 Running: {cmd_str}")
    try:
        result = subprocess.run(
            cmd,
            check=check,
            text=True,
            input=input,
            env=env,
            cwd=cwd,
            stdout=subprocess.PIPE if capture_output else None,
            stderr=subprocess.PIPE if capture_output else None,
        )
        if capture_output:
            logger.debug(f"🟢 Output:\n{result.stdout}")
        return result
    except subprocess.CalledProcessError as e:
        raise CommandError(cmd_str, e.returncode, e.stderr or "") from e
    except FileNotFoundError as e:
        raise CommandError(cmd_str, 127, str(e)) from e

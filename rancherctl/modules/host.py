"""Host command execution.

All effectful operations against the local machine go through ``Host``.
In dry-run mode they are logged and skipped.
"""
import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Mapping, Optional

import requests

from ..config import Config
from ..errors import DependencyError, UnsupportedEnvironmentError
from ..utils import redact_command, run_command

logger = logging.getLogger("rancherctl.host")


def detect_sudo() -> List[str]:
    """Return the privilege prefix for mutating commands."""
    if os.geteuid() == 0:
        return []
    if shutil.which("sudo"):
        return ["sudo"]
    raise UnsupportedEnvironmentError("This tool requires root or sudo.")


class Host:
    """Runs commands and writes files on the local machine."""

    def __init__(self, dry_run: bool = False, sudo: Optional[List[str]] = None):
        self.dry_run = dry_run
        self.sudo = detect_sudo() if sudo is None else list(sudo)

    def which(self, name: str) -> Optional[str]:
        return shutil.which(name)

    def run(
        self,
        cmd: List[str],
        *,
        privileged: bool = False,
        check: bool = True,
        capture_output: bool = False,
        input: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> subprocess.CompletedProcess:
        """Run a mutating command. Skipped in dry-run mode."""
        full = (self.sudo + list(cmd)) if privileged else list(cmd)
        if self.dry_run:
            logger.info(f"[dry-run] would run: {redact_command(full)}")
            return subprocess.CompletedProcess(full, 0, "", "")
        return run_command(full, check=check, capture_output=capture_output, input=input, env=env)

    def write_file(self, path: Path, content: str, mode: int = 0o644) -> None:
        path = Path(path)
        if self.dry_run:
            logger.info(f"[dry-run] would write {path}")
            return
        if self.sudo:
            self.run(["mkdir", "-p", str(path.parent)], privileged=True)
            self.run(["tee", str(path)], privileged=True, input=content, capture_output=True)
            self.run(["chmod", format(mode, "o"), str(path)], privileged=True)
            return
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        os.chmod(path, mode)

    def remove(self, *paths: Path, recursive: bool = False) -> None:
        flags = "-rf" if recursive else "-f"
        self.run(["rm", flags] + [str(p) for p in paths], privileged=True)

    def install_binary(self, src: Path, dest: Path) -> None:
        self.run(
            ["install", "-o", "root", "-g", "root", "-m", "0755", str(src), str(dest)],
            privileged=True,
        )

    def download(self, url: str, dest: Path) -> Path:
        """Download ``url`` to ``dest``. Skipped in dry-run mode."""
        if self.dry_run:
            logger.info(f"[dry-run] would download {url}")
            return dest
        logger.debug(f"⬇️  Downloading {url}")
        try:
            with requests.get(url, stream=True, timeout=Config.DOWNLOAD_TIMEOUT) as response:
                response.raise_for_status()
                with open(dest, "wb") as f:
                    for chunk in response.iter_content(chunk_size=1 << 16):
                        f.write(chunk)
        except requests.RequestException as e:
            raise DependencyError(f"Failed to download {url}: {e}") from e
        return dest

    def fetch_text(self, url: str) -> str:
        try:
            response = requests.get(url, timeout=Config.DOWNLOAD_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DependencyError(f"Failed to fetch {url}: {e}") from e
        return response.text

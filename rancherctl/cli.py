import logging
import sys
from typing import List, Optional

import typer

from rancherctl.commands import install, manifest, status, uninstall
from rancherctl.config import Config
from rancherctl.errors import SetupError
from rancherctl.logging import setup_logging

logger = logging.getLogger("rancherctl.cli")

# exit status Click uses for bad flags and invalid choices
USAGE_ERROR = 2

app = typer.Typer(help="Bootstrap and tear down a single-node Rancher management cluster on RKE2.")

app.command("install")(install.install_cmd)
app.command("uninstall")(uninstall.uninstall_cmd)
app.command("status")(status.status_cmd)
app.command("manifest")(manifest.manifest_cmd)


# Global options callback
@app.callback()
def callback(
    ctx: typer.Context,
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """rancherctl - Rancher management cluster setup."""
    ctx.obj = {"debug": debug}
    setup_logging(debug)


def log_usage_error(args: List[str]) -> None:
    """Record a rejected command line in the audit log."""
    try:
        setup_logging(audit_log=Config.AUDIT_LOG)
    except SetupError as e:
        logger.error(str(e))
        return
    logger.error(f"Invalid arguments: {' '.join(args)}. See 'rancherctl --help'.")


def main(argv: Optional[List[str]] = None) -> int:
    """Console entry point.

    Usage errors (unknown flags, invalid choices) exit with 1 like every
    other fatal error, rather than Click's default of 2, and are written to
    the audit log.
    """
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        app(args=args, prog_name="rancherctl")
        code = 0
    except SystemExit as e:
        code = e.code

    if code is None:
        return 0
    if not isinstance(code, int):
        return 1
    if code == USAGE_ERROR:
        log_usage_error(args)
        return 1
    return code


if __name__ == "__main__":
    sys.exit(main())

import logging

import typer

from ..config import Config
from ..errors import SetupError
from ..logging import setup_logging

logger = logging.getLogger("rancherctl")


def start_audit(ctx: typer.Context) -> None:
    """Re-configure logging to also append to the audit log."""
    debug = bool(ctx.obj and ctx.obj.get("debug"))
    setup_logging(debug=debug, audit_log=Config.AUDIT_LOG)


def fail(error: SetupError) -> None:
    """Report a fatal error and exit with status 1."""
    logger.error(str(error))
    logger.debug("Traceback:", exc_info=True)
    raise typer.Exit(code=1)

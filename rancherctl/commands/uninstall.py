import logging

import typer

from ..errors import SetupError
from ..modules.host import Host
from ..modules.uninstall import Uninstaller
from ..utils.kube import KubeProbe
from . import fail, start_audit

logger = logging.getLogger("rancherctl.commands.uninstall")


def uninstall_cmd(
    ctx: typer.Context,
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be removed without removing"),
):
    """Tear down everything recorded in the install marker."""
    try:
        start_audit(ctx)
        logger.info("🧼 Starting uninstall")
        Uninstaller(Host(dry_run=dry_run), KubeProbe()).run()
        logger.info("✅ Uninstall complete")
    except SetupError as e:
        fail(e)

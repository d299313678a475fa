import logging
from typing import Optional

import typer
from pydantic import ValidationError

from .. import __version__
from ..config import Config
from ..errors import ConfigurationError, SetupError
from ..models import CapiProvider, CertType, IngressMode, InstallOptions, default_bootstrap_password
from ..modules.install import install
from . import fail, start_audit

logger = logging.getLogger("rancherctl.commands.install")


def install_cmd(
    ctx: typer.Context,
    force: bool = typer.Option(False, "--force", help="Reinstall even if the install marker exists"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Log what would be done without changing anything"),
    hostname: str = typer.Option("suse-ai-cluster-manager.xyz", "--hostname", help="Rancher hostname"),
    bootstrap_password: Optional[str] = typer.Option(
        None, "--bootstrap-password", help="Rancher bootstrap password (default: CHANGEME-<random>)"
    ),
    email: str = typer.Option("you@example.com", "--email", help="Let's Encrypt contact email"),
    cert_type: CertType = typer.Option(CertType.SELF_SIGNED, "--cert-type", help="Rancher certificate type"),
    ingress_mode: IngressMode = typer.Option(IngressMode.HOSTPORT, "--ingress-mode", help="NGINX ingress topology"),
    capi_provider: CapiProvider = typer.Option(
        CapiProvider.K3K, "--capi-provider", help="Provider used to provision workload clusters"
    ),
):
    """Install RKE2, Helm, cert-manager, NGINX ingress, Rancher and Cluster API."""
    try:
        start_audit(ctx)
        generated = bootstrap_password is None
        try:
            options = InstallOptions(
                hostname=hostname,
                bootstrap_password=bootstrap_password or default_bootstrap_password(),
                email=email,
                cert_type=cert_type,
                ingress_mode=ingress_mode,
                capi_provider=capi_provider,
                force=force,
                dry_run=dry_run,
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid option: {e}") from e

        logger.info(f"🚀 Starting setup (v{__version__})")
        state = install(options)
        if state is None:
            return
        if generated and not dry_run:
            # console only, never the audit log
            typer.echo(f"Rancher bootstrap password: {options.bootstrap_password}")
        logger.info(f"✅ Setup complete (dry-run={str(dry_run).lower()}). Audit log: {Config.AUDIT_LOG}")
    except SetupError as e:
        fail(e)

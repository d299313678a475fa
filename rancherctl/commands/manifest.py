from pathlib import Path
from typing import Optional

import typer

from ..modules.manifest import dump_manifest, render_vcluster_cluster


def manifest_cmd(
    name: str = typer.Option("test", "--name", help="Workload cluster name"),
    endpoint_host: Optional[str] = typer.Option(
        None, "--endpoint-host", help="Control-plane endpoint host (default: <name>.default.svc)"
    ),
    port: int = typer.Option(443, "--port", help="Control-plane endpoint port"),
    vcluster_version: Optional[str] = typer.Option(None, "--vcluster-version", help="vcluster chart version"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
):
    """Render a CAPI Cluster + VCluster manifest for a workload cluster."""
    text = dump_manifest(render_vcluster_cluster(name, endpoint_host, port, vcluster_version))
    if output:
        output.write_text(text)
        typer.echo(f"📝 Wrote {output}")
    else:
        typer.echo(text, nl=False)

import json

import typer

from ..modules.status import check_status
from ..utils.kube import KubeProbe


def status_cmd(
    output_json: bool = typer.Option(False, "--json", help="Print the status as JSON"),
):
    """Show the install marker and the readiness of each component."""
    status = check_status(KubeProbe())
    if output_json:
        typer.echo(json.dumps(status, indent=2))
        return

    marker = status["marker"]
    if marker is None:
        typer.echo("📄 Install marker: not found")
    else:
        typer.echo("📄 Install marker:")
        for key, value in marker.items():
            typer.echo(f"  {key}: {value}")

    typer.echo(f"📡 API ready: {'yes' if status['api_ready'] else 'no'}")
    for name, ready in status["components"].items():
        typer.echo(f"  {'✅' if ready else '❌'} {name}")

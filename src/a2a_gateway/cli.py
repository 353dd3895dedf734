from __future__ import annotations
import json
import typer
from .client import A2AClient, A2AClientError
from .config import settings

app = typer.Typer(add_completion=False, help="A2A agent gateway CLI")


def _base() -> str:
    return settings.agent_base_url


@app.command()
def serve(host: str = settings.a2a_host, port: int = settings.a2a_port, reload: bool = False):
    """Run the gateway with uvicorn."""
    import uvicorn
    uvicorn.run("a2a_gateway.server:app", host=host, port=port, reload=reload)


@app.command()
def send(agent_id: str, text: str = "Hello from CLI", full: bool = False):
    """Send one text message to an agent and print the reply."""
    client = A2AClient(_base())
    try:
        if full:
            typer.echo(json.dumps(client.send_message(agent_id, text), indent=2))
        else:
            typer.echo(client.send(agent_id, text))
    except A2AClientError as e:
        typer.echo(f"error {e.code}: {e.message}", err=True)
        raise typer.Exit(code=1)


@app.command()
def agents():
    """List agents registered on the server."""
    for a in A2AClient(_base()).list_agents():
        state = "ready" if a.get("ready") else f"not ready ({a.get('reason', '')})"
        typer.echo(f"{a['id']}\t{state}")


@app.command()
def card(agent_id: str):
    """Print the agent card served for an agent."""
    typer.echo(json.dumps(A2AClient(_base()).card(agent_id), indent=2))


if __name__ == "__main__":
    app()

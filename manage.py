import json
from pathlib import Path
import subprocess
from typing import Annotated

from rich import print
import typer

from social_auth.core.config import settings
from social_auth.core.enums import OAuthProviders
from social_auth.core.exceptions.types import ConfigurationException
from social_auth.core.services.oauth import build_network_manager

app = typer.Typer()


@app.command()
def checkconfig():
    """
    Checks that every social login provider has complete OAuth client settings.

    Prints the redirect URI and scopes of each provider. Secrets are never printed.

    Raises:
        typer.Exit: If any provider is missing its client id, secret or redirect URI.
    """
    network_manager = build_network_manager(settings)
    failed = False
    for key in network_manager.providers():
        config = network_manager.get_sdk(key).config
        try:
            config.validate()
        except ConfigurationException as e:
            print(f"[red]{key}:[/red] {e.message}")
            failed = True
            continue
        print(
            f"[green]{key}:[/green] redirect_uri={config.redirect_uri} "
            f"scopes={' '.join(config.scopes)}"
        )
    if failed:
        raise typer.Exit(1)


@app.command()
def authurl(
    provider: Annotated[OAuthProviders, typer.Argument()] = OAuthProviders.GOOGLE,
):
    """
    Prints the provider authorization URL the login route would redirect to.

    The URL is built without a state parameter; use it to check the
    client id, redirect URI and scopes registered with the provider.
    """
    network_manager = build_network_manager(settings)
    try:
        url = network_manager.get_sdk(provider.value).get_authorization_url()
    except ConfigurationException as e:
        print(f"[red]Error:[/red] {e.message}")
        raise typer.Exit(1)
    typer.echo(url)


@app.command()
def openapi(
    output: Annotated[Path, typer.Option("--output", "-o")] = Path("openapi.json"),
):
    """
    Writes the OpenAPI schema of the application to a file.

    Args:
        output (Path): Destination file. Defaults to openapi.json.
    """
    from social_auth.main import app as fastapi_app

    output.write_text(json.dumps(fastapi_app.openapi(), indent=4), encoding="utf-8")
    print(f"[green]OpenAPI schema written to {output}[/green]")


@app.command()
def runserver(
    host: Annotated[str, typer.Option()] = "127.0.0.1",
    port: Annotated[int, typer.Option()] = 8000,
    reload: Annotated[bool, typer.Option()] = False,
):
    """
    Runs the FastAPI application with uvicorn.

    Raises:
        subprocess.CalledProcessError: If uvicorn exits with an error.
    """
    command = [
        "uvicorn",
        "social_auth.main:app",
        "--host",
        host,
        "--port",
        str(port),
    ]
    if reload:
        command.append("--reload")
    try:
        print(f"Starting server: {' '.join(command)}")
        subprocess.run(command, check=True)
    except subprocess.CalledProcessError as e:
        print(f"[red]Error:[/red] {e}")
        raise


if __name__ == "__main__":
    app()

"""CLI for coze-workflow-server.

Provides commands for running the MCP server and printing client configuration.
"""

import json
import sys

import click

from .config import TOKEN_ENV_VAR


@click.group()
@click.version_option(package_name='coze-workflow-server')
def main():
    """coze-workflow-server CLI.

    Run the Coze workflow MCP server and generate MCP client configuration.
    """


@main.command()
@click.option(
    '--api-token',
    default=None,
    help='Coze API token written into the config (defaults to a placeholder)',
)
def config(api_token):
    """Output MCP JSON configuration for use with MCP clients.

    This configuration can be added to MCP client config files
    (e.g., Claude Desktop, Continue, etc.) to launch the
    coze-workflow-server MCP server.
    """
    from .config import generate_mcp_config

    mcp_config = generate_mcp_config(api_token=api_token)

    # Output as pretty-printed JSON
    click.echo(json.dumps(mcp_config, indent=2))


@main.command()
@click.option(
    '--api-token',
    envvar=TOKEN_ENV_VAR,
    default=None,
    help=f'Coze API token (defaults to ${TOKEN_ENV_VAR})',
)
def serve(api_token):
    """Run the MCP server over stdio.

    The server refuses to start without a Coze API token, passed with
    --api-token or through the COZE_API_TOKEN environment variable.
    """
    import asyncio

    from .config import ConfigurationError, load_settings

    environ = {TOKEN_ENV_VAR: api_token} if api_token else {}
    try:
        settings = load_settings(environ)
    except ConfigurationError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort()

    from . import server

    try:
        asyncio.run(server.main(settings))
    except Exception as e:
        click.echo(f"Server error: {e}", err=True)
        sys.exit(1)


if __name__ == '__main__':
    main()

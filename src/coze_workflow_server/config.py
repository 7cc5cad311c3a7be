"""Configuration for coze-workflow-server.

Loads the Coze API token from the environment and generates MCP JSON
configuration for connecting clients to the server.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional


TOKEN_ENV_VAR = "COZE_API_TOKEN"
TOKEN_PLACEHOLDER = "<your-coze-api-token>"


class ConfigurationError(Exception):
    """Raised when required configuration is missing."""
    pass


@dataclass(frozen=True)
class Settings:
    api_token: str


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read server settings from the environment.

    Args:
        environ: Mapping to read from (default: os.environ)

    Returns:
        Settings with the Coze API token

    Raises:
        ConfigurationError: If COZE_API_TOKEN is unset or empty
    """
    if environ is None:
        environ = os.environ

    api_token = environ.get(TOKEN_ENV_VAR, "")
    if not api_token:
        raise ConfigurationError(f"{TOKEN_ENV_VAR} environment variable is required")

    return Settings(api_token=api_token)


def generate_mcp_config(api_token: Optional[str] = None) -> dict:
    """Generate MCP JSON configuration for the workflow server.

    Args:
        api_token: Coze API token (default: a placeholder to fill in)

    Returns:
        Dictionary containing MCP configuration that can be serialized to JSON.

    Example:
        >>> config = generate_mcp_config("pat_xxx")
        >>> import json
        >>> print(json.dumps(config, indent=2))
        {
          "mcpServers": {
            "coze-workflow-server": {
              "command": "coze-workflow-server",
              "args": ["serve"],
              "env": {
                "COZE_API_TOKEN": "pat_xxx"
              }
            }
          }
        }
    """
    return {
        "mcpServers": {
            "coze-workflow-server": {
                "command": "coze-workflow-server",
                "args": ["serve"],
                "env": {
                    TOKEN_ENV_VAR: api_token or TOKEN_PLACEHOLDER
                }
            }
        }
    }

"""Tests for CLI commands and configuration."""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from coze_workflow_server.cli import main
from coze_workflow_server.config import (
    ConfigurationError,
    TOKEN_PLACEHOLDER,
    generate_mcp_config,
    load_settings,
)


class TestCLIHelp:
    """Test CLI help output."""

    def test_main_help(self):
        """Test that main --help works."""
        runner = CliRunner()
        result = runner.invoke(main, ['--help'])

        assert result.exit_code == 0
        assert 'coze-workflow-server CLI' in result.output
        assert 'serve' in result.output
        assert 'config' in result.output

    def test_serve_help(self):
        """Test that serve --help works."""
        runner = CliRunner()
        result = runner.invoke(main, ['serve', '--help'])

        assert result.exit_code == 0
        assert 'Run the MCP server over stdio' in result.output
        assert '--api-token' in result.output

    def test_config_help(self):
        """Test that config --help works."""
        runner = CliRunner()
        result = runner.invoke(main, ['config', '--help'])

        assert result.exit_code == 0
        assert 'Output MCP JSON configuration' in result.output


class TestConfigCommand:
    """Test config command output."""

    def test_config_output_valid_json(self):
        """Test that config outputs the expected JSON structure."""
        runner = CliRunner()
        result = runner.invoke(main, ['config'], env={'COZE_API_TOKEN': None})

        assert result.exit_code == 0

        config = json.loads(result.output)
        server_config = config['mcpServers']['coze-workflow-server']

        assert server_config['command'] == 'coze-workflow-server'
        assert server_config['args'] == ['serve']
        assert server_config['env']['COZE_API_TOKEN'] == TOKEN_PLACEHOLDER

    def test_config_uses_token_option(self):
        """Test that --api-token is written into the config."""
        runner = CliRunner()
        result = runner.invoke(main, ['config', '--api-token', 'pat_123'])

        assert result.exit_code == 0
        config = json.loads(result.output)
        assert config['mcpServers']['coze-workflow-server']['env']['COZE_API_TOKEN'] == 'pat_123'

    def test_config_does_not_print_env_token(self):
        """Test that $COZE_API_TOKEN is never written to stdout."""
        runner = CliRunner()
        result = runner.invoke(main, ['config'], env={'COZE_API_TOKEN': 'pat_env'})

        assert result.exit_code == 0
        config = json.loads(result.output)
        assert 'pat_env' not in result.output
        assert config['mcpServers']['coze-workflow-server']['env']['COZE_API_TOKEN'] == TOKEN_PLACEHOLDER


class TestServeCommand:
    """Test serve command startup."""

    def test_serve_without_token_aborts(self):
        """Test that serve refuses to start without a token."""
        runner = CliRunner()

        with patch('coze_workflow_server.server.main') as mock_main:
            result = runner.invoke(main, ['serve'], env={'COZE_API_TOKEN': None})

        assert result.exit_code != 0
        assert 'COZE_API_TOKEN environment variable is required' in result.output
        mock_main.assert_not_called()

    def test_serve_with_token_runs_server(self):
        """Test that serve passes loaded settings to the server."""
        runner = CliRunner()

        with patch('asyncio.run') as mock_run, \
                patch('coze_workflow_server.server.main') as mock_main:
            result = runner.invoke(main, ['serve'], env={'COZE_API_TOKEN': 'pat_abc'})

        assert result.exit_code == 0
        mock_run.assert_called_once()
        settings = mock_main.call_args.args[0]
        assert settings.api_token == 'pat_abc'

    def test_serve_reports_server_error(self):
        """Test that an unexpected server failure exits non-zero."""
        runner = CliRunner()

        with patch('asyncio.run', side_effect=RuntimeError('stdio closed')), \
                patch('coze_workflow_server.server.main'):
            result = runner.invoke(main, ['serve', '--api-token', 'pat_abc'])

        assert result.exit_code == 1
        assert 'Server error: stdio closed' in result.output


class TestSettings:
    """Test configuration loading."""

    def test_load_settings(self):
        """Test reading the token from a mapping."""
        settings = load_settings({'COZE_API_TOKEN': 'pat_1'})

        assert settings.api_token == 'pat_1'

    @pytest.mark.parametrize('environ', [{}, {'COZE_API_TOKEN': ''}])
    def test_load_settings_missing_token(self, environ):
        """Test that a missing or empty token is a configuration error."""
        with pytest.raises(ConfigurationError, match='COZE_API_TOKEN environment variable is required'):
            load_settings(environ)

    def test_load_settings_reads_os_environ(self, monkeypatch):
        """Test that os.environ is the default source."""
        monkeypatch.setenv('COZE_API_TOKEN', 'pat_os')

        assert load_settings().api_token == 'pat_os'

    def test_generate_mcp_config(self):
        """Test the generated client configuration."""
        config = generate_mcp_config('pat_x')

        assert config == {
            'mcpServers': {
                'coze-workflow-server': {
                    'command': 'coze-workflow-server',
                    'args': ['serve'],
                    'env': {'COZE_API_TOKEN': 'pat_x'},
                }
            }
        }

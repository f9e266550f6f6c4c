"""
Tests for the donutcli command line interface.
"""

from click.testing import CliRunner

from donutcli import __version__
from donutcli.cli import main


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_main_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ['--help'])

        assert result.exit_code == 0
        assert "donut-cli" in result.output
        for command in ("interactive", "commands", "menu-demo"):
            assert command in result.output

    def test_main_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ['--version'])

        assert result.exit_code == 0
        assert result.output.strip() == f"donutcli, version {__version__}"

    def test_missing_config_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, ['--config', str(tmp_path / "nope.yaml"), 'commands', 'list'])

        assert result.exit_code == 1
        assert "Configuration problem" in result.output

    def test_log_format_choice(self):
        runner = CliRunner()
        result = runner.invoke(main, ['--log-format', 'xml', 'commands', 'list'])
        assert result.exit_code == 2


class TestCommandsGroup:
    """Test the commands subcommands."""

    def test_list(self):
        runner = CliRunner()
        result = runner.invoke(main, ['commands', 'list'])

        assert result.exit_code == 0
        for name in ("/strategy", "/backtest", "/analyze", "/paper", "/quit"):
            assert name in result.output

    def test_run_quit(self):
        runner = CliRunner()
        result = runner.invoke(main, ['commands', 'run', 'quit'])

        assert result.exit_code == 0
        assert "action: exit" in result.output
        assert "continue: false" in result.output

    def test_run_agent_command(self):
        runner = CliRunner()
        result = runner.invoke(main, ['commands', 'run', 'analyze', 'run123'])

        assert result.exit_code == 0
        assert "agent: BACKTEST_ANALYST" in result.output
        assert "prompt: Provide a detailed analysis of backtest run: run123" in result.output

    def test_run_joins_arguments(self):
        runner = CliRunner()
        result = runner.invoke(main, ['commands', 'run', '/strategy', 'grid', 'bot'])

        assert result.exit_code == 0
        assert "prompt: grid bot" in result.output

    def test_run_unknown(self):
        runner = CliRunner()
        result = runner.invoke(main, ['commands', 'run', 'quti'])

        assert result.exit_code == 1
        assert "Unknown command: /quti" in result.output
        assert "/quit" in result.output


class TestInteractiveCommands:
    """Commands that need a terminal."""

    def test_interactive_quits(self):
        runner = CliRunner()
        result = runner.invoke(main, ['interactive', '--no-banner'], input="/analyze\n/quit\n")

        assert result.exit_code == 0
        assert "Usage: /analyze" in result.output
        assert "Goodbye!" in result.output

    def test_interactive_agent_choice(self):
        runner = CliRunner()
        result = runner.invoke(main, ['interactive', '--no-banner', '--agent', 'backtest_analyst'],
                               input="how did it do\n/quit\n")

        assert result.exit_code == 0
        assert "BACKTEST_ANALYST cannot run" in result.output

    def test_interactive_unknown_agent(self):
        runner = CliRunner()
        result = runner.invoke(main, ['interactive', '--agent', 'wizard'], input="/quit\n")

        assert result.exit_code == 2
        assert "wizard" in result.output

    def test_menu_demo_needs_terminal(self):
        runner = CliRunner()
        result = runner.invoke(main, ['menu-demo'])

        assert result.exit_code == 1
        assert "Terminal mode problem" in result.output

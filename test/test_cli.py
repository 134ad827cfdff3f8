import json

from click.testing import CliRunner

from httpopts.cli import cli


class TestCliCommands:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Commands:" in result.output
        assert "show" in result.output
        assert "listen" in result.output
        assert "port" in result.output

    def test_port_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["port", "--help"])
        assert result.exit_code == 0
        assert "read" in result.output
        assert "wait" in result.output


class TestShow:
    def test_plain(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["show", "--", "--port=8080", "--threads=16", "--daemon"])
        assert result.exit_code == 0
        assert "port: 8080" in result.output
        assert "threads: 16" in result.output
        assert "daemon: True" in result.output
        assert "lifetime: unbounded" in result.output

    def test_without_separator(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["show", "--port=8080", "--hit-refresh"])
        assert result.exit_code == 0
        assert "port: 8080" in result.output
        assert "hit_refresh: True" in result.output

    def test_json(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--json", "show", "--", "--lifetime=1000", "--threads=2"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {
            "port": None,
            "daemon": False,
            "hit_refresh": False,
            "threads": 2,
            "lifetime": 1000,
            "max_latency": None,
        }

    def test_show_does_not_bind(self, port_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["show", "--", f"--port={port_path}"])
        assert result.exit_code == 0
        assert not port_path.exists()

    def test_malformed_argument(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["show", "--", "port=8080"])
        assert result.exit_code == 1
        assert "can't parse this argument: 'port=8080'" in result.output

    def test_malformed_number(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["show", "--", "--threads=abc"])
        assert result.exit_code == 1
        assert "--threads expects a decimal number" in result.output


class TestListen:
    def test_writes_port_file(self, port_path, isolated_config):
        runner = CliRunner()
        result = runner.invoke(cli, ["listen", "--", f"--port={port_path}", "--lifetime=0"])
        assert result.exit_code == 0, result.output
        assert port_path.read_text(encoding="utf-8").isdigit()

    def test_missing_port(self, isolated_config):
        runner = CliRunner()
        result = runner.invoke(cli, ["listen", "--", "--lifetime=0"])
        assert result.exit_code == 1
        assert "--port must be specified" in result.output

    def test_port_out_of_range(self, isolated_config):
        runner = CliRunner()
        result = runner.invoke(cli, ["listen", "--", "--port=99999999", "--lifetime=0"])
        assert result.exit_code == 1
        assert "can't listen on port 99999999" in result.output


class TestPortCommands:
    def test_read(self, port_path):
        port_path.write_text("8123")
        runner = CliRunner()
        result = runner.invoke(cli, ["port", "read", str(port_path)])
        assert result.exit_code == 0
        assert result.output.strip() == "8123"

    def test_read_json(self, port_path):
        port_path.write_text("8123")
        runner = CliRunner()
        result = runner.invoke(cli, ["--json", "port", "read", str(port_path)])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"path": str(port_path), "port": 8123}

    def test_read_missing(self, port_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["port", "read", str(port_path)])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_read_garbage(self, port_path):
        port_path.write_text("nope")
        runner = CliRunner()
        result = runner.invoke(cli, ["port", "read", str(port_path)])
        assert result.exit_code == 1
        assert "decimal number" in result.output

    def test_wait(self, port_path):
        port_path.write_text("9001")
        runner = CliRunner()
        result = runner.invoke(cli, ["port", "wait", str(port_path), "--timeout", "1"])
        assert result.exit_code == 0
        assert result.output.strip() == "9001"

    def test_wait_timeout(self, port_path):
        runner = CliRunner()
        result = runner.invoke(cli, ["port", "wait", str(port_path), "-t", "0.2"])
        assert result.exit_code == 1
        assert "No port written" in result.output

    def test_clear(self, port_path):
        port_path.write_text("9001")
        runner = CliRunner()
        result = runner.invoke(cli, ["port", "clear", str(port_path)])
        assert result.exit_code == 0
        assert not port_path.exists()

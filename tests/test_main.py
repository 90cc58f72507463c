"""
Tests for the command line entry point.

Runs main() against replay files so no serial device is needed; the serial
path is exercised with a patched Connector.open.
"""

import signal
from unittest.mock import patch

import pytest

import config
import main as cli
from cs704_core.io import ConnectorError

from tests.conftest import FakeSerial, location_line


@pytest.fixture(autouse=True)
def restore_config():
    """main() writes CLI overrides into the config dicts and installs signal handlers."""
    saved = {
        "serial": dict(config.SERIAL_CONFIG),
        "processing": dict(config.PROCESSING_CONFIG),
        "output": dict(config.OUTPUT_CONFIG),
        "logging": dict(config.LOGGING_CONFIG),
    }
    sigint = signal.getsignal(signal.SIGINT)
    sigterm = signal.getsignal(signal.SIGTERM)
    yield
    config.SERIAL_CONFIG.update(saved["serial"])
    config.PROCESSING_CONFIG.update(saved["processing"])
    config.OUTPUT_CONFIG.update(saved["output"])
    config.LOGGING_CONFIG.update(saved["logging"])
    signal.signal(signal.SIGINT, sigint)
    signal.signal(signal.SIGTERM, sigterm)


class TestArguments:
    """Tests for option parsing."""

    def test_defaults(self):
        args = cli.parse_args([])

        assert args.port is None
        assert args.rezero is False
        assert args.mode_filter is None
        assert args.replay is None

    def test_short_flags(self):
        args = cli.parse_args(["-p", "/dev/ttyACM0", "-b", "9600", "-z", "-i", "go", "-m", "IMU"])
        cli.apply_args(args)

        assert config.SERIAL_CONFIG["port"] == "/dev/ttyACM0"
        assert config.SERIAL_CONFIG["baud"] == 9600
        assert config.SERIAL_CONFIG["init_command"] == "go"
        assert config.PROCESSING_CONFIG["mode_filter"] == "IMU"
        assert config.PROCESSING_CONFIG["rezero"] is True

    def test_log_level(self):
        cli.apply_args(cli.parse_args(["--log-level", "warning"]))
        assert config.LOGGING_CONFIG["level"] == "WARNING"

        cli.apply_args(cli.parse_args(["--debug"]))
        assert config.LOGGING_CONFIG["level"] == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["--log-level", "verbose"])


class TestMain:
    """End-to-end runs of main()."""

    def test_replay(self, tmp_path, capsys):
        capture = tmp_path / "capture.jsonl"
        capture.write_text("\n".join([
            location_line(10.0, 10.0, "GPS"),
            location_line(10.0, 10.0, "IMU"),
            "not json",
            location_line(12.5, 11.0, "IMU"),
        ]) + "\n")

        status = cli.main(["--replay", str(capture), "-z", "-m", "IMU"])

        out = capsys.readouterr().out
        assert status == 0
        assert "\r X: 0.00 Y: 0.00 Mode: IMU" in out
        assert "\r X: 2.50 Y: 1.00 Mode: IMU" in out
        assert "Mode: GPS" not in out
        assert "STREAM SUMMARY" in out

    def test_serial_open_failure_exits_nonzero(self):
        with patch.object(cli.Connector, "open", side_effect=ConnectorError("no such device")):
            assert cli.main(["-p", "/dev/does-not-exist"]) == 1

    def test_init_command_sent_once(self):
        port = FakeSerial([(location_line(1.0, 2.0) + "\n").encode()])

        with patch.object(cli.Connector, "open", return_value=cli.Connector(port)) as mock_open:
            status = cli.main(["-p", "/dev/ttyUSB0", "-b", "57600", "-i", "start\r\n"])

        assert status == 0
        mock_open.assert_called_once_with("/dev/ttyUSB0", 57600)
        assert port.written == [b"start\r\n"]
        assert port.closed

    def test_read_failure_exits_nonzero(self):
        port = FakeSerial([(location_line(1.0, 2.0) + "\n").encode(), OSError(5, "Input/output error")])

        with patch.object(cli.Connector, "open", return_value=cli.Connector(port)):
            assert cli.main([]) == 1

        assert port.closed

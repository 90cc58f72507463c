"""
CS704 UI main program
Reads location telemetry from the serial device and shows the current fix
"""

import sys
import signal
import logging
import argparse
from typing import Optional

import config
from cs704_core.io import Connector, ConnectorError, ReplayConnector
from cs704_core.domain import LoopConfig, ProcessingLoop, send_init_command
from cs704_core.metrics import get_metrics

logger = logging.getLogger(__name__)


class TelemetryUI:
    """Connects to the device and runs the processing loop."""

    def __init__(self, replay_path: Optional[str] = None):
        self.replay_path = replay_path
        self.connector = None
        self.loop = ProcessingLoop(LoopConfig(
            mode_filter=config.PROCESSING_CONFIG["mode_filter"],
            rezero=config.PROCESSING_CONFIG["rezero"],
        ))

        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _signal_handler(self, signum, frame):
        logger.info(f"Received signal {signum}, stopping...")
        self.loop.stop()
        # readline may block indefinitely, leave through the finally in start()
        raise KeyboardInterrupt

    def _open_connector(self):
        if self.replay_path:
            logger.info(f"Replaying {self.replay_path}")
            return ReplayConnector(self.replay_path)
        return Connector.open(config.SERIAL_CONFIG["port"], config.SERIAL_CONFIG["baud"])

    def start(self):
        """
        Open the transport, send the init command and process lines.

        Raises:
            ConnectorError: On transport failure
        """
        self.connector = self._open_connector()
        try:
            send_init_command(self.connector, config.SERIAL_CONFIG["init_command"])
            self.loop.run(self.connector)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()

    def stop(self):
        self.loop.stop()
        if self.connector is not None:
            self.connector.close()
            self.connector = None

        if config.OUTPUT_CONFIG["print_summary"]:
            get_metrics().print_summary()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='CS704 location telemetry UI')
    parser.add_argument('--port', '-p', type=str, default=None,
                        help='Serial port for receiving telemetry (default: %s)'
                        % config.SERIAL_CONFIG["port"])
    parser.add_argument('--baud', '-b', type=int, default=None,
                        help='Serial baud rate (default: %d)' % config.SERIAL_CONFIG["baud"])
    parser.add_argument('--rezero', '-z', action='store_true',
                        help='Zero location based on first location packet')
    parser.add_argument('--init-command', '-i', type=str, default=None,
                        help='Init command to be sent to the device')
    parser.add_argument('--mode-filter', '-m', type=str, default=None,
                        help='Location mode type to filter on')
    parser.add_argument('--replay', type=str, default=None,
                        help='Read recorded telemetry from a file instead of the serial port')
    parser.add_argument('--log-level', type=str.upper, default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        help='Logging level (default: %s)' % config.LOGGING_CONFIG["level"])
    parser.add_argument('--debug', '-d', action='store_true',
                        help='Enable debug logging')
    return parser.parse_args(argv)


def apply_args(args: argparse.Namespace):
    """Override config blocks with command line options."""
    if args.port:
        config.SERIAL_CONFIG["port"] = args.port
    if args.baud:
        config.SERIAL_CONFIG["baud"] = args.baud
    if args.init_command is not None:
        config.SERIAL_CONFIG["init_command"] = args.init_command
    if args.mode_filter is not None:
        config.PROCESSING_CONFIG["mode_filter"] = args.mode_filter
    if args.rezero:
        config.PROCESSING_CONFIG["rezero"] = True
    if args.log_level:
        config.LOGGING_CONFIG["level"] = args.log_level
    if args.debug:
        config.LOGGING_CONFIG["level"] = "DEBUG"


def main(argv=None) -> int:
    args = parse_args(argv)
    apply_args(args)

    logging.basicConfig(
        level=getattr(logging, config.LOGGING_CONFIG["level"]),
        format=config.LOGGING_CONFIG["format"]
    )

    try:
        ui = TelemetryUI(replay_path=args.replay)
        ui.start()
    except ConnectorError as e:
        logger.error(f"Serial error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
CS704 location telemetry core package.

Reads JSON telemetry records from a serial-attached positioning device and
shows the current location on the terminal.

Package structure:
- proto: Message schemas (LOC, RAW, MSG)
- io: Serial connector, line decoder
- domain: Processing loop (mode filter, zero calibration), display
- metrics: Stream counters, drop reasons
"""

__version__ = "0.1.0"

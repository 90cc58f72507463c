"""
CS704 UI configuration
"""

# Serial port configuration
SERIAL_CONFIG = {
    "port": "/dev/serial0",   # Serial device
    "baud": 115200,           # Baud rate
    "init_command": None,     # Sent once after opening the port
}

# Processing configuration
PROCESSING_CONFIG = {
    "mode_filter": None,      # Only show Location fixes with this mode
    "rezero": False,          # Zero on the first shown Location fix
}

# Output configuration
OUTPUT_CONFIG = {
    "print_summary": True,    # Print stream counters on exit
}

# Logging configuration
LOGGING_CONFIG = {
    "level": "INFO",
    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}

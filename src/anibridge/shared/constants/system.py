"""
System Constants

Base time units and application identity.
"""

SECOND = 1
MINUTE = 60 * SECOND
HOUR = 60 * MINUTE


class Application:
    """Application identity."""

    NAME = "anibridge"
    VERSION = "0.1.0"


class Logging:
    """Logging defaults."""

    DEFAULT_LEVEL = "INFO"
    DEFAULT_FILE_PATH = ".anibridge/anibridge.log"

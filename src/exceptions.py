#!/usr/bin/env python3
"""
Typed errors raised by the conversion pipeline.

Every error carries a machine-readable `code` so a ConversionResult can be
reported by tag instead of by message text.

    ConversionError (base)
    +-- ConfigError
    +-- ParseError
    +-- UnknownFormatError
    +-- RemoteError
    +-- ConversionInProgressError

A security that cannot be found is not an error: the row is logged and skipped.

Copyright (c) 2025 Steve Angelovich
Licensed under the MIT License - see LICENSE file for details.
"""


class ConversionError(Exception):
    """Base exception for all conversion errors."""

    code: str = "CONVERSION_ERROR"


class ConfigError(ConversionError):
    """A required setting (account id, API url, secret) is missing."""

    code: str = "CONFIG_ERROR"

    def __init__(self, setting: str, message: str | None = None):
        self.setting = setting
        super().__init__(message or f"Required setting {setting} is not set")


class ParseError(ConversionError):
    """The CSV could not be turned into rows."""

    code: str = "PARSE_ERROR"

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"Line {line}: {message}"
        super().__init__(message)


class UnknownFormatError(ConversionError):
    """The broker format could not be detected or is not supported."""

    code: str = "UNKNOWN_FORMAT"

    def __init__(self, message: str = "Unable to detect the broker format", confidence: float = 0.0):
        self.confidence = confidence
        super().__init__(message)


class RemoteError(ConversionError):
    """The instrument lookup service failed (network, HTTP or authentication)."""

    code: str = "REMOTE_ERROR"

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ConversionInProgressError(ConversionError):
    """Another conversion is already running in this process."""

    code: str = "CONVERSION_IN_PROGRESS"

    def __init__(self):
        super().__init__("A conversion is already running, try again when it has finished")

"""Errors raised by licht."""

from __future__ import annotations


class LichtError(Exception):
    """Base class for all licht errors."""


class ConfigError(LichtError):
    """Error to indicate the configuration is invalid or unreadable."""


class InvalidSteppingParameters(LichtError):
    """Error to indicate a stepping mode was given unusable parameters."""


class DeviceNotFound(LichtError):
    """Error to indicate an explicitly named device does not exist."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Couldn't find device with name '{name}'")
        self.name = name


class NoDeviceFound(LichtError):
    """Error to indicate discovery found no devices at all."""


class DeviceError(LichtError):
    """A failure scoped to a single device. The batch carries on."""


class DeviceReadError(DeviceError):
    """Error to indicate a brightness value could not be read."""


class DeviceWriteError(DeviceError):
    """Error to indicate a brightness value could not be written."""


class InvalidDeviceState(DeviceError):
    """Error to indicate a device reports values we cannot compute with."""

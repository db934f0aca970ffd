"""Brightness devices.

A device is anything that can report its current and maximum raw brightness,
accept a new raw brightness and identify itself. ``SysfsDevice`` is the
implementation backed by a Linux sysfs class directory such as
``/sys/class/backlight/intel_backlight``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from .const import BRIGHTNESS_FILE, MAX_BRIGHTNESS_FILE
from .exceptions import DeviceReadError, DeviceWriteError, InvalidDeviceState

_LOGGER = logging.getLogger(__name__)


class DeviceClass(Enum):
    BACKLIGHT = "backlight"
    LED = "leds"

    @classmethod
    def from_directory_name(cls, name: str) -> DeviceClass:
        """Map a sysfs class directory name to a DeviceClass.
        Raises ValueError for anything else."""
        for device_class in cls:
            if device_class.value == name:
                return device_class

        raise ValueError(f"'{name}' is not a supported sysfs class")


@dataclass(frozen=True, slots=True)
class DeviceIdentity:
    name: str
    device_class: DeviceClass
    path: Path | None = None

    def __str__(self) -> str:
        return f"{self.device_class.value}/{self.name}"


@runtime_checkable
class BrightnessDevice(Protocol):
    """What the stepper needs from a device."""

    def read_current(self) -> int:
        ...

    def read_max(self) -> int:
        ...

    def write(self, value: int) -> None:
        ...

    def identity(self) -> DeviceIdentity:
        ...


@dataclass(frozen=True, slots=True)
class BrightnessReading:
    """Raw brightness values read from a device at one point in time"""

    current: int
    maximum: int

    @property
    def normalized(self) -> float:
        if self.maximum <= 0:
            raise InvalidDeviceState(
                f"Max brightness must be positive, got {self.maximum}"
            )
        return self.current / self.maximum

    @property
    def percent(self) -> int:
        return round(self.normalized * 100)


def read_brightness(device: BrightnessDevice) -> BrightnessReading:
    """Read current and max brightness from the device.
    Raises DeviceReadError if either read fails."""
    return BrightnessReading(current=device.read_current(), maximum=device.read_max())


class SysfsDevice:
    """A backlight or LED device in a sysfs class directory"""

    def __init__(self, path: Path, device_class: DeviceClass | None = None) -> None:
        """device_class is derived from the parent directory name when not given"""
        self.path = Path(path)
        if device_class is None:
            device_class = DeviceClass.from_directory_name(self.path.parent.name)
        self.device_class = device_class

    @property
    def name(self) -> str:
        return self.path.name

    def identity(self) -> DeviceIdentity:
        return DeviceIdentity(
            name=self.name, device_class=self.device_class, path=self.path
        )

    def _read_int(self, file_name: str) -> int:
        file_path = self.path / file_name
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DeviceReadError(f"Unable to read {file_path}: {exc}") from exc

        try:
            value = int(text.strip())
        except ValueError as exc:
            raise DeviceReadError(
                f"Unexpected contents in {file_path}: {text.strip()!r}"
            ) from exc

        if value < 0:
            raise DeviceReadError(f"Negative value in {file_path}: {value}")

        return value

    def read_current(self) -> int:
        return self._read_int(BRIGHTNESS_FILE)

    def read_max(self) -> int:
        return self._read_int(MAX_BRIGHTNESS_FILE)

    def write(self, value: int) -> None:
        file_path = self.path / BRIGHTNESS_FILE
        _LOGGER.debug("Writing %s to %s", value, file_path)
        try:
            file_path.write_text(str(int(value)), encoding="utf-8")
        except OSError as exc:
            raise DeviceWriteError(f"Writing brightness to {file_path} failed: {exc}") from exc

    def __repr__(self) -> str:
        return f"SysfsDevice({str(self.path)!r})"

    def __str__(self) -> str:
        return str(self.identity())

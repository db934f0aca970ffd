"""Discover brightness devices in sysfs."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
import logging
from pathlib import Path
from typing import Protocol

from .const import SYSFS_CLASS_ROOT
from .device import BrightnessDevice, DeviceClass, SysfsDevice

_LOGGER = logging.getLogger(__name__)


class DeviceDiscovery(Protocol):
    """What the stepper needs from discovery: a restartable sequence of
    devices and lookup by name."""

    def __iter__(self) -> Iterator[BrightnessDevice]:
        ...

    def find(self, name: str) -> BrightnessDevice | None:
        ...


class SysfsDiscovery:
    """Enumerates devices below one or more sysfs class directories.

    Iterating is lazy and restartable: every iteration lists the class
    directories again. Classes are visited in the given order and entries are
    sorted by name within a class, so enumeration order is stable.
    """

    def __init__(
        self,
        root: Path = SYSFS_CLASS_ROOT,
        classes: Sequence[DeviceClass] = (DeviceClass.BACKLIGHT,),
    ) -> None:
        self.root = Path(root)
        self.classes = tuple(classes)

    @classmethod
    def with_leds(cls, root: Path = SYSFS_CLASS_ROOT) -> SysfsDiscovery:
        """Discovery over backlights followed by LEDs"""
        return cls(root, (DeviceClass.BACKLIGHT, DeviceClass.LED))

    def class_path(self, device_class: DeviceClass) -> Path:
        return self.root / device_class.value

    def _discover(self, device_class: DeviceClass) -> Iterator[SysfsDevice]:
        class_path = self.class_path(device_class)
        try:
            entries = sorted(class_path.iterdir(), key=lambda entry: entry.name)
        except OSError as exc:
            _LOGGER.debug("Couldn't read %s: %s", class_path, exc)
            return

        for entry in entries:
            if entry.is_dir():
                yield SysfsDevice(entry, device_class)

    def devices(self) -> Iterator[SysfsDevice]:
        for device_class in self.classes:
            yield from self._discover(device_class)

    def __iter__(self) -> Iterator[SysfsDevice]:
        return self.devices()

    def find(self, name: str) -> SysfsDevice | None:
        """Return the device with the given directory name, or None if there is
        no such device. Named lookups search every class, configured ones first."""
        if not name or "/" in name or name in (".", ".."):
            return None

        search = [*self.classes]
        search.extend(c for c in DeviceClass if c not in self.classes)

        for device_class in search:
            device_path = self.class_path(device_class) / name
            if device_path.is_dir():
                return SysfsDevice(device_path, device_class)

        return None

    def __repr__(self) -> str:
        classes = ", ".join(device_class.value for device_class in self.classes)
        return f"SysfsDiscovery({str(self.root)!r}, [{classes}])"

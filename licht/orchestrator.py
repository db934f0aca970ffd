"""Apply a brightness step to one or more devices."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import logging
import math

from . import curves
from .const import DEFAULT_MIN_BRIGHTNESS
from .device import BrightnessDevice, BrightnessReading, DeviceIdentity, read_brightness
from .discovery import DeviceDiscovery
from .exceptions import (
    DeviceError,
    DeviceNotFound,
    InvalidSteppingParameters,
    NoDeviceFound,
)
from .stepping import DEFAULT_STEPPING, Stepping

_LOGGER = logging.getLogger(__name__)


class SelectionKind(Enum):
    EXPLICIT = "explicit"
    DEFAULT = "default"
    ALL = "all"


@dataclass(frozen=True, slots=True)
class DeviceSelection:
    """Which device(s) a step applies to"""

    kind: SelectionKind
    name: str | None = None

    @classmethod
    def explicit(cls, name: str) -> DeviceSelection:
        return cls(SelectionKind.EXPLICIT, name)

    @classmethod
    def default(cls) -> DeviceSelection:
        return cls(SelectionKind.DEFAULT)

    @classmethod
    def all(cls) -> DeviceSelection:
        return cls(SelectionKind.ALL)


@dataclass(slots=True)
class StepOutcome:
    """What happened to a single device.

    new is the brightness written, or the brightness that would have been
    written in a dry run. previous, new and maximum are None when the device
    could not be read.
    """

    identity: DeviceIdentity
    previous: int | None = None
    new: int | None = None
    maximum: int | None = None
    written: bool = False
    dry_run: bool = False
    error: DeviceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def new_percent(self) -> int | None:
        return _percent(self.new, self.maximum)


def _percent(value: int | None, maximum: int | None) -> int | None:
    if value is None or not maximum:
        return None
    return round(value / maximum * 100)


def compute_brightness(
    stepping: Stepping,
    step: float,
    reading: BrightnessReading,
    min_brightness: int = DEFAULT_MIN_BRIGHTNESS,
) -> int:
    """Return the clamped raw brightness one step from the reading.
    Raises InvalidDeviceState if the reading has no usable maximum."""
    max_raw = reading.maximum
    value = curves.apply(stepping, step, reading.current, reading.normalized)
    if not stepping.is_raw:
        value = curves.clamp_unit(value) * max_raw

    computed = round(value)

    # A floor above the device maximum would break value <= max
    floor = min(min_brightness, max_raw)
    return max(floor, min(max_raw, computed))


def exit_status(outcomes: list[StepOutcome]) -> int:
    """0 if every device was stepped, 1 if any device failed"""
    return 0 if all(outcome.ok for outcome in outcomes) else 1


class BrightnessStepper:
    """Resolves devices through a discovery and steps their brightness.

    Fatal problems (bad parameters, unknown or missing devices) raise before
    any device is touched. Failures reading or writing a single device are
    recorded on that device's StepOutcome and the remaining devices are still
    processed.
    """

    def __init__(self, discovery: DeviceDiscovery) -> None:
        self.discovery = discovery

    def resolve(self, selection: DeviceSelection) -> list[BrightnessDevice]:
        """Return the devices a selection refers to.
        Raises DeviceNotFound or NoDeviceFound."""
        if selection.kind is SelectionKind.EXPLICIT:
            device = self.discovery.find(selection.name or "")
            if device is None:
                raise DeviceNotFound(selection.name or "")

            _LOGGER.debug("Using device %s", device.identity())
            return [device]

        if selection.kind is SelectionKind.DEFAULT:
            _LOGGER.debug("No device name supplied, attempting to discover devices")
            device = next(iter(self.discovery), None)
            if device is None:
                raise NoDeviceFound("No backlight device supplied or found")

            _LOGGER.debug("Using first device found: %s", device.identity())
            return [device]

        if selection.kind is SelectionKind.ALL:
            devices: list[BrightnessDevice] = []
            seen: set[DeviceIdentity] = set()
            for device in self.discovery:
                identity = device.identity()
                if identity in seen:
                    _LOGGER.debug("Skipping duplicate device %s", identity)
                    continue
                seen.add(identity)
                devices.append(device)

            if not devices:
                raise NoDeviceFound("Couldn't find any devices")

            _LOGGER.debug("Found %d devices", len(devices))
            return devices

        raise ValueError(f"Unknown device selection: {selection.kind}")

    def step(
        self,
        stepping: Stepping = DEFAULT_STEPPING,
        step: float = 0,
        selection: DeviceSelection | None = None,
        min_brightness: int = DEFAULT_MIN_BRIGHTNESS,
        dry_run: bool = False,
    ) -> list[StepOutcome]:
        """Step the brightness of the selected devices and return one outcome
        per device, in discovery order."""
        stepping.validate()

        if isinstance(step, bool) or not isinstance(step, (int, float)):
            raise InvalidSteppingParameters(f"Step must be a number, got {step!r}")
        try:
            finite = math.isfinite(step)
        except OverflowError as exc:
            raise InvalidSteppingParameters("Step is too large") from exc
        if not finite:
            raise InvalidSteppingParameters(f"Step must be finite, got {step}")
        if isinstance(min_brightness, bool) or not isinstance(min_brightness, int):
            raise InvalidSteppingParameters(
                f"Min brightness must be an integer, got {min_brightness!r}"
            )
        if min_brightness < 0:
            raise InvalidSteppingParameters(
                f"Min brightness must not be negative, got {min_brightness}"
            )

        if selection is None:
            selection = DeviceSelection.default()

        devices = self.resolve(selection)
        _LOGGER.debug(
            "Stepping %d device(s) by %s using %s%s",
            len(devices),
            step,
            stepping,
            " (dry run)" if dry_run else "",
        )

        return [
            self._step_device(device, stepping, step, min_brightness, dry_run)
            for device in devices
        ]

    def _step_device(
        self,
        device: BrightnessDevice,
        stepping: Stepping,
        step: float,
        min_brightness: int,
        dry_run: bool,
    ) -> StepOutcome:
        outcome = StepOutcome(identity=device.identity(), dry_run=dry_run)

        try:
            reading = read_brightness(device)
            outcome.previous = reading.current
            outcome.maximum = reading.maximum

            new_brightness = compute_brightness(
                stepping, step, reading, min_brightness
            )
            outcome.new = new_brightness

            _LOGGER.info(
                "%s: %d%% -> %d%%",
                outcome.identity,
                reading.percent,
                outcome.new_percent,
            )

            if dry_run:
                _LOGGER.info("Dry run, not writing %s", outcome.identity)
            else:
                device.write(new_brightness)
                outcome.written = True

        except DeviceError as exc:
            _LOGGER.warning("Unable to step %s: %s", outcome.identity, exc)
            outcome.error = exc

        return outcome

"""Step the brightness of sysfs backlight and LED devices along response curves."""

from __future__ import annotations

from .config import StepRequest, build_request, load_config, run_request, step_from_config
from .device import BrightnessDevice, DeviceClass, DeviceIdentity, SysfsDevice
from .discovery import SysfsDiscovery
from .exceptions import (
    ConfigError,
    DeviceError,
    DeviceNotFound,
    DeviceReadError,
    DeviceWriteError,
    InvalidDeviceState,
    InvalidSteppingParameters,
    LichtError,
    NoDeviceFound,
)
from .orchestrator import (
    BrightnessStepper,
    DeviceSelection,
    SelectionKind,
    StepOutcome,
    exit_status,
)
from .stepping import DEFAULT_STEPPING, RECOMMENDED_BLEND, Stepping, SteppingKind

__version__ = "0.3.0"

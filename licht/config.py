"""Configuration for licht.

Settings come from an optional YAML file merged with caller overrides, for
example:

mode: blend
ratio: 0.75
a: 1.8
b: 2.2
min_brightness: 10
device: intel_backlight
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any

import voluptuous as vol
import yaml

from .const import (
    CONF_A,
    CONF_ALL_DEVICES,
    CONF_B,
    CONF_DEVICE,
    CONF_DRY_RUN,
    CONF_EXPONENT,
    CONF_INCLUDE_LEDS,
    CONF_MIN_BRIGHTNESS,
    CONF_MODE,
    CONF_RATIO,
    CONF_STEP,
    CONF_SYSFS_ROOT,
    CONF_VERBOSE,
    DEFAULT_EXPONENT,
    DEFAULT_MIN_BRIGHTNESS,
    RECOMMENDED_BLEND_A,
    RECOMMENDED_BLEND_B,
    RECOMMENDED_BLEND_RATIO,
    SYSFS_CLASS_ROOT,
)
from .device import DeviceClass
from .discovery import DeviceDiscovery, SysfsDiscovery
from .exceptions import ConfigError
from .orchestrator import BrightnessStepper, DeviceSelection, StepOutcome
from .stepping import Stepping, SteppingKind
from .utils import default_config_path, setup_logging

_LOGGER = logging.getLogger(__name__)

_POSITIVE_FLOAT = vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))


def _check_device_selection(conf: dict[str, Any]) -> dict[str, Any]:
    if conf.get(CONF_DEVICE) and conf[CONF_ALL_DEVICES]:
        raise vol.Invalid(
            f"{CONF_DEVICE} and {CONF_ALL_DEVICES} are mutually exclusive"
        )
    return conf


CONFIG_SCHEMA = vol.All(
    vol.Schema(
        {
            vol.Optional(CONF_MODE, default=SteppingKind.PARABOLIC.value): vol.In(
                [kind.value for kind in SteppingKind]
            ),
            vol.Optional(CONF_STEP): vol.Coerce(float),
            vol.Optional(CONF_EXPONENT, default=DEFAULT_EXPONENT): _POSITIVE_FLOAT,
            vol.Optional(CONF_RATIO, default=RECOMMENDED_BLEND_RATIO): vol.All(
                vol.Coerce(float), vol.Range(min=0, max=1)
            ),
            vol.Optional(CONF_A, default=RECOMMENDED_BLEND_A): _POSITIVE_FLOAT,
            vol.Optional(CONF_B, default=RECOMMENDED_BLEND_B): _POSITIVE_FLOAT,
            vol.Optional(CONF_MIN_BRIGHTNESS, default=DEFAULT_MIN_BRIGHTNESS): vol.All(
                vol.Any(int, vol.All(str, vol.Coerce(int))), vol.Range(min=0)
            ),
            vol.Optional(CONF_DEVICE): vol.Any(None, vol.All(str, vol.Length(min=1))),
            vol.Optional(CONF_ALL_DEVICES, default=False): bool,
            vol.Optional(CONF_INCLUDE_LEDS, default=False): bool,
            vol.Optional(CONF_DRY_RUN, default=False): bool,
            vol.Optional(CONF_VERBOSE, default=False): bool,
            vol.Optional(CONF_SYSFS_ROOT, default=str(SYSFS_CLASS_ROOT)): vol.All(
                vol.Coerce(str), vol.Length(min=1)
            ),
        }
    ),
    _check_device_selection,
)


@dataclass(frozen=True, slots=True)
class StepRequest:
    """A fully validated request to step brightness"""

    stepping: Stepping
    step: float
    selection: DeviceSelection
    min_brightness: int = DEFAULT_MIN_BRIGHTNESS
    dry_run: bool = False
    verbose: bool = False
    sysfs_root: Path = SYSFS_CLASS_ROOT
    include_leds: bool = False


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load the YAML config file. A missing file is an empty config.
    Raises ConfigError if the file cannot be read or parsed."""
    if path is None:
        path = default_config_path()

    path = Path(path)
    if not path.exists():
        _LOGGER.debug("No config file at %s", path)
        return {}

    try:
        raw = path.read_text(encoding="utf-8")
        payload = yaml.safe_load(raw)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Failed to read config file {path}: {exc}") from exc

    if payload is None:
        return {}

    if not isinstance(payload, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    _LOGGER.debug("Loaded config from %s", path)
    return payload


def validate_config(data: dict[str, Any]) -> dict[str, Any]:
    """Apply defaults and validate. Raises ConfigError."""
    try:
        return CONFIG_SCHEMA(dict(data))
    except vol.Invalid as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc


def stepping_from_config(conf: dict[str, Any]) -> Stepping:
    kind = SteppingKind(conf[CONF_MODE])

    if kind is SteppingKind.PARABOLIC:
        return Stepping.parabolic(conf[CONF_EXPONENT])
    if kind is SteppingKind.BLEND:
        return Stepping.blend(conf[CONF_RATIO], conf[CONF_A], conf[CONF_B])
    if kind is SteppingKind.GEOMETRIC:
        return Stepping.geometric()
    if kind is SteppingKind.SET:
        return Stepping.set_value()
    return Stepping.absolute()


def selection_from_config(conf: dict[str, Any]) -> DeviceSelection:
    if conf.get(CONF_DEVICE):
        return DeviceSelection.explicit(conf[CONF_DEVICE])
    if conf[CONF_ALL_DEVICES]:
        return DeviceSelection.all()
    return DeviceSelection.default()


def make_discovery(sysfs_root: Path, include_leds: bool = False) -> SysfsDiscovery:
    if include_leds:
        return SysfsDiscovery.with_leds(sysfs_root)
    return SysfsDiscovery(sysfs_root, (DeviceClass.BACKLIGHT,))


def discovery_from_config(conf: dict[str, Any]) -> SysfsDiscovery:
    return make_discovery(Path(conf[CONF_SYSFS_ROOT]), conf[CONF_INCLUDE_LEDS])


def build_request(data: dict[str, Any] | None = None, **overrides: Any) -> StepRequest:
    """Merge config data with overrides (None overrides are ignored) and build a
    validated StepRequest. Raises ConfigError."""
    merged = dict(data or {})
    merged.update({key: value for key, value in overrides.items() if value is not None})

    conf = validate_config(merged)

    if conf.get(CONF_STEP) is None:
        raise ConfigError("No step value provided")

    # Dry run implies verbose
    dry_run = conf[CONF_DRY_RUN]

    return StepRequest(
        stepping=stepping_from_config(conf),
        step=conf[CONF_STEP],
        selection=selection_from_config(conf),
        min_brightness=conf[CONF_MIN_BRIGHTNESS],
        dry_run=dry_run,
        verbose=conf[CONF_VERBOSE] or dry_run,
        sysfs_root=Path(conf[CONF_SYSFS_ROOT]),
        include_leds=conf[CONF_INCLUDE_LEDS],
    )


def run_request(
    request: StepRequest, discovery: DeviceDiscovery | None = None
) -> list[StepOutcome]:
    """Execute a request. Uses sysfs discovery unless one is given."""
    if discovery is None:
        discovery = make_discovery(request.sysfs_root, request.include_leds)

    stepper = BrightnessStepper(discovery)
    return stepper.step(
        request.stepping,
        request.step,
        request.selection,
        min_brightness=request.min_brightness,
        dry_run=request.dry_run,
    )


def step_from_config(
    config_path: Path | None = None, **overrides: Any
) -> list[StepOutcome]:
    """Load the config file, apply overrides, set up logging and step."""
    request = build_request(load_config(config_path), **overrides)
    setup_logging(request.verbose)
    return run_request(request)

"""Constants for the licht brightness stepper."""

from pathlib import Path

SYSFS_CLASS_ROOT = Path("/sys/class")

BRIGHTNESS_FILE = "brightness"
MAX_BRIGHTNESS_FILE = "max_brightness"

DEFAULT_EXPONENT = 2.0
DEFAULT_MIN_BRIGHTNESS = 0

# Recommended blend parameters, see the blend curve in curves.py
RECOMMENDED_BLEND_RATIO = 0.75
RECOMMENDED_BLEND_A = 1.8
RECOMMENDED_BLEND_B = 2.2

# Blend inversion is a bounded bisection
BLEND_TOLERANCE = 1e-6
BLEND_MAX_ITERATIONS = 100

CONFIG_DIR_NAME = "licht"
CONFIG_FILE_NAME = "config.yaml"

# Config keys
CONF_MODE = "mode"
CONF_STEP = "step"
CONF_EXPONENT = "exponent"
CONF_RATIO = "ratio"
CONF_A = "a"
CONF_B = "b"
CONF_MIN_BRIGHTNESS = "min_brightness"
CONF_DEVICE = "device"
CONF_ALL_DEVICES = "all_devices"
CONF_INCLUDE_LEDS = "include_leds"
CONF_DRY_RUN = "dry_run"
CONF_VERBOSE = "verbose"
CONF_SYSFS_ROOT = "sysfs_root"

from __future__ import annotations

from pathlib import Path

import pytest

from .fakes import make_sysfs_device


@pytest.fixture
def sysfs_root(tmp_path: Path) -> Path:
    """A fake /sys/class with two backlights and one LED"""
    root = tmp_path / "class"
    make_sysfs_device(root, "backlight", "intel_backlight", 1200, 7500)
    make_sysfs_device(root, "backlight", "acpi_video0", 50, 100)
    make_sysfs_device(root, "leds", "input3::capslock", 0, 1)
    return root

import logging
import unittest
from pathlib import Path

import pytest

from licht import utils
from licht.config import (
    build_request,
    discovery_from_config,
    load_config,
    run_request,
    selection_from_config,
    step_from_config,
    stepping_from_config,
    validate_config,
)
from licht.device import DeviceClass
from licht.exceptions import ConfigError, DeviceNotFound
from licht.orchestrator import DeviceSelection, SelectionKind
from licht.stepping import DEFAULT_STEPPING, Stepping

from .fakes import FakeDevice, FakeDiscovery


class TestValidateConfig(unittest.TestCase):
    def test_defaults(self):
        conf = validate_config({})
        self.assertEqual(conf["mode"], "parabolic")
        self.assertEqual(conf["exponent"], 2.0)
        self.assertEqual(conf["min_brightness"], 0)
        self.assertFalse(conf["dry_run"])
        self.assertEqual(conf["sysfs_root"], "/sys/class")
        self.assertEqual(stepping_from_config(conf), DEFAULT_STEPPING)
        self.assertEqual(selection_from_config(conf), DeviceSelection.default())

    def test_coerces_numbers(self):
        conf = validate_config({"step": "-20", "min_brightness": "5", "exponent": "3"})
        self.assertEqual(conf["step"], -20.0)
        self.assertEqual(conf["min_brightness"], 5)
        self.assertEqual(conf["exponent"], 3.0)

    def test_each_mode(self):
        expected = {
            "absolute": Stepping.absolute(),
            "set": Stepping.set_value(),
            "geometric": Stepping.geometric(),
            "parabolic": Stepping.parabolic(),
            "blend": Stepping.blend(0.75, 1.8, 2.2),
        }
        for mode, stepping in expected.items():
            self.assertEqual(stepping_from_config(validate_config({"mode": mode})), stepping)

    def test_blend_parameters(self):
        conf = validate_config({"mode": "blend", "ratio": 0.5, "a": 2, "b": 4})
        self.assertEqual(stepping_from_config(conf), Stepping.blend(0.5, 2.0, 4.0))

    def test_invalid_values(self):
        for data in (
            {"mode": "linear-ish"},
            {"exponent": 0},
            {"exponent": -1},
            {"ratio": 1.5},
            {"a": 0},
            {"min_brightness": -1},
            {"min_brightness": 5.9},
            {"step": "lots"},
            {"device": ""},
            {"unknown_key": 1},
            {"device": "intel_backlight", "all_devices": True},
        ):
            with self.assertRaises(ConfigError, msg=str(data)):
                validate_config(data)

    def test_selection(self):
        self.assertEqual(
            selection_from_config(validate_config({"device": "intel_backlight"})),
            DeviceSelection.explicit("intel_backlight"),
        )
        self.assertEqual(
            selection_from_config(validate_config({"all_devices": True})).kind,
            SelectionKind.ALL,
        )

    def test_discovery(self):
        discovery = discovery_from_config(
            validate_config({"sysfs_root": "/tmp/fake", "include_leds": True})
        )
        self.assertEqual(discovery.root, Path("/tmp/fake"))
        self.assertEqual(discovery.classes, (DeviceClass.BACKLIGHT, DeviceClass.LED))


class TestBuildRequest(unittest.TestCase):
    def test_requires_step(self):
        with self.assertRaises(ConfigError):
            build_request({"mode": "geometric"})

    def test_overrides_win_and_none_is_ignored(self):
        request = build_request(
            {"mode": "geometric", "min_brightness": 10, "step": 5},
            step=-10,
            min_brightness=None,
        )
        self.assertEqual(request.step, -10.0)
        self.assertEqual(request.min_brightness, 10)
        self.assertEqual(request.stepping, Stepping.geometric())

    def test_dry_run_implies_verbose(self):
        request = build_request(step=5, dry_run=True)
        self.assertTrue(request.dry_run)
        self.assertTrue(request.verbose)

    def test_verbose_alone(self):
        request = build_request(step=5, verbose=True)
        self.assertFalse(request.dry_run)
        self.assertTrue(request.verbose)


def test_load_missing_file(tmp_path):
    assert load_config(tmp_path / "missing.yaml") == {}


def test_load_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == {}


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "mode: blend\nratio: 0.6\nmin_brightness: 10\ndevice: intel_backlight\n",
        encoding="utf-8",
    )

    assert load_config(path) == {
        "mode": "blend",
        "ratio": 0.6,
        "min_brightness": 10,
        "device": "intel_backlight",
    }


@pytest.mark.parametrize("contents", ["- just\n- a list\n", "mode: [unclosed\n"])
def test_load_rejects_bad_files(tmp_path, contents):
    path = tmp_path / "config.yaml"
    path.write_text(contents, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_default_config_path_uses_xdg(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    assert utils.default_config_path() == tmp_path / "licht" / "config.yaml"


def test_default_config_path_falls_back_to_home(monkeypatch, tmp_path):
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    assert utils.default_config_path() == tmp_path / ".config" / "licht" / "config.yaml"


def test_run_request_with_given_discovery():
    device = FakeDevice("panel", current=40, maximum=80)
    request = build_request({"mode": "absolute", "device": "panel"}, step=8)

    [outcome] = run_request(request, FakeDiscovery([device]))

    assert outcome.new == 48
    assert device.writes == [48]


def test_run_request_unknown_device():
    request = build_request({"device": "nope"}, step=8)

    with pytest.raises(DeviceNotFound):
        run_request(request, FakeDiscovery([FakeDevice("panel", 1, 2)]))


@pytest.fixture
def restore_licht_logger():
    logger = logging.getLogger("licht")
    level = logger.level
    yield logger
    if utils._HANDLER is not None:
        logger.removeHandler(utils._HANDLER)
        utils._HANDLER = None
    logger.setLevel(level)


def test_setup_logging_is_idempotent(restore_licht_logger):
    utils.setup_logging(verbose=False)
    utils.setup_logging(verbose=True)

    assert restore_licht_logger.level == logging.INFO
    assert restore_licht_logger.handlers.count(utils._HANDLER) == 1


def test_step_from_config_end_to_end(sysfs_root, tmp_path, restore_licht_logger):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        f"mode: set\nsysfs_root: {sysfs_root}\ninclude_leds: true\n",
        encoding="utf-8",
    )

    outcomes = step_from_config(config_path, step=1, all_devices=True)

    assert [str(o.identity) for o in outcomes] == [
        "backlight/acpi_video0",
        "backlight/intel_backlight",
        "leds/input3::capslock",
    ]
    assert all(o.written and o.new == 1 for o in outcomes)
    brightness = sysfs_root / "leds" / "input3::capslock" / "brightness"
    assert brightness.read_text(encoding="utf-8") == "1"

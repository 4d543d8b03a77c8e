"""Tests for the joint loader and its entry points.

Validates that:
    - A joint with no keys gets every documented default, then activation
    - Setters run in the fixed order with activation last
    - MIN_FERROR falls back to the resolved FERROR
    - Units default and conversion follow the joint type
    - A rejected setter or malformed value aborts before activation
    - Out-of-range joint indices fail before any setter is called
    - The return-code wrapper maps errors to -1
"""

from __future__ import annotations

import math
from pathlib import Path
from unittest.mock import MagicMock, call

import pytest

from motion_control.configs.defaults import LoaderDefaults
from motion_control.configs.errors import (
    ControllerRejection,
    ConversionError,
    JointRangeError,
    MissingKeyError,
    SourceOpenError,
)
from motion_control.configs.source import IniConfigSource
from motion_control.configs.units import JointType
from motion_control.hardware.controller import InMemoryJointController
from motion_control.joints.loader import (
    configure_all_joints,
    configure_joint,
    ini_joint,
    load_joint,
)
from motion_control.joints.params import HomingParams
from motion_control.utils.logging_config import get_context

SETTER_ORDER = [
    "set_joint_type",
    "set_units",
    "set_backlash",
    "set_min_position_limit",
    "set_max_position_limit",
    "set_ferror",
    "set_min_ferror",
    "set_homing_params",
    "set_max_velocity",
    "set_max_acceleration",
    "activate",
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def _source(text: str) -> IniConfigSource:
    return IniConfigSource.from_string(text)


def _write(tmp_path: Path, text: str, name: str = "machine.ini") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture()
def controller() -> InMemoryJointController:
    return InMemoryJointController()


@pytest.fixture()
def empty_source() -> IniConfigSource:
    return _source("[TRAJ]\nAXES = 2\n")


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class TestDefaults:
    def test_default_calls(self, empty_source: IniConfigSource) -> None:
        ctrl = MagicMock()
        load_joint(1, empty_source, ctrl)

        assert ctrl.method_calls == [
            call.set_joint_type(1, JointType.LINEAR),
            call.set_units(1, 1.0),
            call.set_backlash(1, 0.0),
            call.set_min_position_limit(1, -1e99),
            call.set_max_position_limit(1, 1e99),
            call.set_ferror(1, 1.0),
            call.set_min_ferror(1, 1.0),
            call.set_homing_params(
                1, 0.0, 0.0, -1.0, 0.0, 0.0, False, False, False, -1, 0,
            ),
            call.set_max_velocity(1, 1.0),
            call.set_max_acceleration(1, 1.0),
            call.activate(1),
        ]

    def test_default_parameters(
        self,
        empty_source: IniConfigSource,
        controller: InMemoryJointController,
    ) -> None:
        params = load_joint(0, empty_source, controller)

        assert params.joint_type is JointType.LINEAR
        assert params.min_limit == -1e99
        assert params.max_limit == 1e99
        assert params.ferror == params.min_ferror == 1.0
        assert params.homing == HomingParams()
        assert params.homing.home_vel == -1.0
        assert params.homing.sequence == -1
        assert params.comp_file is None
        assert params.comp_file_type == 0
        assert params.section == "JOINT_0"

    def test_injected_defaults(self, empty_source: IniConfigSource) -> None:
        defaults = LoaderDefaults(
            linear_units=2.0, angular_units=3.0,
            max_velocity=50.0, max_acceleration=500.0,
        )
        params = load_joint(0, empty_source, InMemoryJointController(), defaults)
        assert params.units == 2.0
        assert params.max_velocity == 50.0
        assert params.max_acceleration == 500.0

    def test_angular_default_units(self) -> None:
        src = _source("[JOINT_0]\nTYPE = ANGULAR\n")
        defaults = LoaderDefaults(angular_units=3.0)
        params = load_joint(0, src, InMemoryJointController(), defaults)
        assert params.units == 3.0


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


FULL_JOINT = """\
[JOINT_0]
TYPE = LINEAR
UNITS = inch
BACKLASH = 0.01
MIN_LIMIT = -5
MAX_LIMIT = 300.5
FERROR = 2.0
MIN_FERROR = 0.5
HOME = 1.0
HOME_OFFSET = -2.5
HOME_VEL = 10
HOME_SEARCH_VEL = 20
HOME_LATCH_VEL = -1.5
HOME_IS_SHARED = YES
HOME_USE_INDEX = TRUE
HOME_IGNORE_LIMITS = ON
HOME_SEQUENCE = 2
VOLATILE_HOME = 1
MAX_VELOCITY = 40
MAX_ACCELERATION = 400
"""


class TestResolution:
    def test_every_key(self, controller: InMemoryJointController) -> None:
        params = load_joint(0, _source(FULL_JOINT), controller)

        assert params.units == pytest.approx(1 / 25.4)
        assert params.backlash == 0.01
        assert params.min_limit == -5.0
        assert params.max_limit == 300.5
        assert params.ferror == 2.0
        assert params.min_ferror == 0.5
        assert params.homing == HomingParams(
            home=1.0, offset=-2.5, home_vel=10.0, search_vel=20.0,
            latch_vel=-1.5, use_index=True, ignore_limits=True,
            is_shared=True, sequence=2, volatile_home=1,
        )
        assert params.max_velocity == 40.0
        assert params.max_acceleration == 400.0

        state = controller.joints[0]
        assert state.active
        assert state.homing["is_shared"] is True
        assert state.min_ferror == 0.5

    def test_setter_order(self, controller: InMemoryJointController) -> None:
        load_joint(0, _source(FULL_JOINT), controller)
        assert controller.call_names() == SETTER_ORDER

    def test_min_ferror_falls_back_to_ferror(
        self, controller: InMemoryJointController,
    ) -> None:
        load_joint(0, _source("[JOINT_0]\nFERROR = 0.75\n"), controller)
        state = controller.joints[0]
        assert state.ferror == 0.75
        assert state.min_ferror == 0.75

    def test_angular_units_by_name(self, controller: InMemoryJointController) -> None:
        src = _source("[JOINT_0]\nTYPE = ANGULAR\nUNITS = rad\n")
        params = load_joint(0, src, controller)
        assert params.joint_type is JointType.ANGULAR
        assert params.units == pytest.approx(math.pi / 180)

    def test_linear_joint_rejects_angular_unit_name(
        self, controller: InMemoryJointController,
    ) -> None:
        src = _source("[JOINT_0]\nUNITS = deg\n")
        with pytest.raises(ConversionError, match="UNITS"):
            load_joint(0, src, controller)
        assert controller.call_names() == ["set_joint_type"]

    def test_home_vel_sentinel_passed_verbatim(
        self, controller: InMemoryJointController,
    ) -> None:
        load_joint(0, _source("[JOINT_0]\nMAX_VELOCITY = 5\n"), controller)
        assert controller.joints[0].homing["home_vel"] == -1.0

    def test_only_own_section_is_read(
        self, controller: InMemoryJointController,
    ) -> None:
        src = _source("[JOINT_0]\nBACKLASH = 0.2\n[JOINT_1]\nBACKLASH = 0.3\n")
        assert load_joint(1, src, controller).backlash == 0.3

    def test_log_context_restored(self, empty_source: IniConfigSource) -> None:
        before = get_context()
        load_joint(0, empty_source, InMemoryJointController())
        assert get_context() == before


# ---------------------------------------------------------------------------
# Compensation
# ---------------------------------------------------------------------------


class TestCompensation:
    def test_comp_file_loaded(self, tmp_path: Path) -> None:
        (tmp_path / "x.comp").write_text(
            "0 0.01 -0.01\n100 100.02 99.99\n", encoding="utf-8",
        )
        src = _source("[JOINT_0]\nCOMP_FILE = x.comp\nCOMP_FILE_TYPE = 0\n")
        ctrl = InMemoryJointController(comp_dir=tmp_path)

        params = load_joint(0, src, ctrl)

        assert params.comp_file == "x.comp"
        assert ctrl.call_names()[-2:] == ["load_compensation", "activate"]
        assert ctrl.calls[-2] == ("load_compensation", (0, "x.comp", 0))
        assert len(ctrl.joints[0].comp_table) == 2

    def test_comp_file_type_passed(self) -> None:
        src = _source("[JOINT_0]\nCOMP_FILE = /tmp/y.comp\nCOMP_FILE_TYPE = 1\n")
        ctrl = MagicMock()
        load_joint(0, src, ctrl)
        ctrl.load_compensation.assert_called_once_with(0, "/tmp/y.comp", 1)

    def test_no_comp_file_skips_call(
        self, controller: InMemoryJointController,
    ) -> None:
        load_joint(0, _source("[JOINT_0]\nCOMP_FILE_TYPE = 1\n"), controller)
        assert "load_compensation" not in controller.call_names()

    def test_missing_comp_file_rejected(self, tmp_path: Path) -> None:
        src = _source("[JOINT_0]\nCOMP_FILE = missing.comp\n")
        ctrl = InMemoryJointController(comp_dir=tmp_path)
        with pytest.raises(ControllerRejection) as exc_info:
            load_joint(0, src, ctrl)
        assert exc_info.value.setter == "load_compensation"
        assert not ctrl.is_active(0)

    def test_malformed_comp_file_type(
        self, controller: InMemoryJointController,
    ) -> None:
        src = _source("[JOINT_0]\nCOMP_FILE_TYPE = forward\n")
        with pytest.raises(ConversionError, match="COMP_FILE_TYPE"):
            load_joint(0, src, controller)
        assert "activate" not in controller.call_names()


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


class TestFailures:
    @pytest.mark.parametrize("setter", SETTER_ORDER[:-1])
    def test_rejected_setter_stops_load(
        self, empty_source: IniConfigSource, setter: str,
    ) -> None:
        ctrl = InMemoryJointController(reject={setter})

        with pytest.raises(ControllerRejection) as exc_info:
            load_joint(0, empty_source, ctrl)

        assert exc_info.value.setter == setter
        assert exc_info.value.joint == 0
        names = ctrl.call_names()
        assert names[-1] == setter
        assert names == SETTER_ORDER[: SETTER_ORDER.index(setter) + 1]
        assert not ctrl.is_active(0)

    def test_mock_setter_failure(self, empty_source: IniConfigSource) -> None:
        ctrl = MagicMock()
        ctrl.set_ferror.return_value = 0
        with pytest.raises(ControllerRejection, match="set_ferror"):
            load_joint(0, empty_source, ctrl)
        ctrl.set_min_ferror.assert_not_called()
        ctrl.activate.assert_not_called()

    def test_non_positive_units_rejected(
        self, controller: InMemoryJointController,
    ) -> None:
        with pytest.raises(ControllerRejection, match="set_units"):
            load_joint(0, _source("[JOINT_0]\nUNITS = 0\n"), controller)

    def test_joint_beyond_controller_capacity(self) -> None:
        ctrl = InMemoryJointController(max_joints=2)
        with pytest.raises(ControllerRejection, match="set_joint_type"):
            load_joint(2, _source(""), ctrl)

    @pytest.mark.parametrize(
        ("key", "value"),
        [
            ("TYPE", "HELICAL"),
            ("BACKLASH", "none"),
            ("MIN_LIMIT", "-"),
            ("FERROR", "1,5"),
            ("MIN_FERROR", "x"),
            ("HOME_USE_INDEX", "sometimes"),
            ("HOME_SEQUENCE", "1.5"),
            ("VOLATILE_HOME", "yes"),
            ("MAX_ACCELERATION", "fast"),
            ("BACKLASH", "1_0"),
            ("HOME_SEQUENCE", "1_2"),
        ],
    )
    def test_malformed_value_aborts(
        self, controller: InMemoryJointController, key: str, value: str,
    ) -> None:
        src = _source(f"[JOINT_0]\nMAX_VELOCITY = 5\n{key} = {value}\n")

        with pytest.raises(ConversionError) as exc_info:
            load_joint(0, src, controller)

        assert exc_info.value.key == key
        assert exc_info.value.section == "JOINT_0"
        assert "activate" not in controller.call_names()
        assert not controller.is_active(0)

    def test_homing_values_all_resolved_before_call(
        self, controller: InMemoryJointController,
    ) -> None:
        src = _source("[JOINT_0]\nHOME = 1\nVOLATILE_HOME = bad\n")
        with pytest.raises(ConversionError):
            load_joint(0, src, controller)
        assert "set_homing_params" not in controller.call_names()


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


MACHINE = """\
[TRAJ]
AXES = 2
LINEAR_UNITS = inch
ANGULAR_UNITS = rad

[JOINT_0]
MAX_VELOCITY = 3

[JOINT_1]
TYPE = ANGULAR
"""


class TestConfigureJoint:
    def test_loads_from_file(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        path = _write(tmp_path, MACHINE)
        params = configure_joint(0, path, controller)
        assert params.max_velocity == 3.0
        assert controller.is_active(0)

    def test_traj_units_are_unit_defaults(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        path = _write(tmp_path, MACHINE)
        assert configure_joint(0, path, controller).units == pytest.approx(1 / 25.4)
        assert configure_joint(1, path, controller).units == pytest.approx(math.pi / 180)

    @pytest.mark.parametrize("joint", [2, 5, -1])
    def test_out_of_range(
        self, tmp_path: Path, controller: InMemoryJointController, joint: int,
    ) -> None:
        path = _write(tmp_path, MACHINE)
        with pytest.raises(JointRangeError) as exc_info:
            configure_joint(joint, path, controller)
        assert exc_info.value.axes == 2
        assert controller.calls == []

    def test_missing_axes(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        path = _write(tmp_path, "[TRAJ]\nLINEAR_UNITS = mm\n[JOINT_0]\n")
        with pytest.raises(MissingKeyError):
            configure_joint(0, path, controller)
        assert controller.calls == []

    def test_malformed_axes(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        path = _write(tmp_path, "[TRAJ]\nAXES = three\n")
        with pytest.raises(ConversionError, match="AXES"):
            configure_joint(0, path, controller)

    def test_missing_document(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        with pytest.raises(SourceOpenError):
            configure_joint(0, tmp_path / "absent.ini", controller)

    def test_yaml_document(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        path = _write(
            tmp_path,
            "TRAJ:\n  AXES: 1\nJOINT_0:\n  FERROR: 0.2\n  HOME_USE_INDEX: yes\n",
            name="machine.yaml",
        )
        params = configure_joint(0, path, controller)
        assert params.min_ferror == 0.2
        assert params.homing.use_index is True


class TestConfigureAllJoints:
    def test_all_joints_in_order(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        path = _write(tmp_path, MACHINE)
        params = configure_all_joints(path, controller)

        assert [p.joint for p in params] == [0, 1]
        joints = [args[0] for name, args in controller.calls if name == "activate"]
        assert joints == [0, 1]

    def test_stops_at_first_failure(
        self, tmp_path: Path, controller: InMemoryJointController,
    ) -> None:
        path = _write(tmp_path, MACHINE.replace("MAX_VELOCITY = 3", "MAX_VELOCITY = x"))
        with pytest.raises(ConversionError, match="MAX_VELOCITY"):
            configure_all_joints(path, controller)
        assert list(controller.joints) == [0]
        assert not controller.is_active(0)


class TestIniJoint:
    def test_success(self, tmp_path: Path) -> None:
        path = _write(tmp_path, MACHINE)
        assert ini_joint(1, path, InMemoryJointController()) == 0

    def test_failure_codes(self, tmp_path: Path) -> None:
        path = _write(tmp_path, MACHINE)
        assert ini_joint(2, path, InMemoryJointController()) == -1
        assert ini_joint(0, tmp_path / "absent.ini", InMemoryJointController()) == -1
        rejecting = InMemoryJointController(reject={"activate"})
        assert ini_joint(0, path, rejecting) == -1

    def test_float_overflow_in_yaml(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            "TRAJ:\n  AXES: 1\nJOINT_0:\n  FERROR: " + "9" * 400 + "\n",
            name="machine.yaml",
        )
        ctrl = InMemoryJointController()
        assert ini_joint(0, path, ctrl) == -1
        assert not ctrl.is_active(0)

    def test_empty_yaml_section_gets_defaults(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "TRAJ:\n  AXES: 1\nJOINT_0:\n", name="machine.yaml")
        ctrl = InMemoryJointController()
        assert ini_joint(0, path, ctrl) == 0
        assert ctrl.is_active(0)
        assert ctrl.joints[0].ferror == 1.0

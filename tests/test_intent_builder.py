import json
import math

import pytest

from control.errors import ConfigurationError
from planning.intent_builder import ManipulationIntentBuilder
from planning.types import GraspIntent, PlaceIntent


def test_open_posture_reference_values():
    posture = ManipulationIntentBuilder().build_open_posture()
    assert posture.joint_names == ("gripper_finger1_joint",)
    assert posture.positions == (0.0,)
    assert posture.time_from_start == 2.5


def test_closed_posture_reference_values():
    posture = ManipulationIntentBuilder().build_closed_posture()
    assert posture.joint_names == ("gripper_finger1_joint",)
    assert posture.positions == (0.10,)
    assert posture.time_from_start == 2.5


def test_grasp_intent_reference_values():
    intent = ManipulationIntentBuilder().build_grasp_intent("object", "table1")
    assert isinstance(intent, GraspIntent)
    assert intent.object_id == "object"
    assert intent.support_surface_id == "table1"
    assert intent.grasp_pose.frame_id == "base_link"
    assert intent.grasp_pose.position == (0.406, -0.001, 0.15)
    assert intent.grasp_pose.orientation == (-0.5, 0.5, 0.5, 0.5)
    assert intent.pre_grasp_approach.direction == (0.0, 0.0, -1.0)
    assert intent.pre_grasp_approach.min_distance == 0.1
    assert intent.pre_grasp_approach.desired_distance == 0.15
    assert intent.post_grasp_retreat.direction == (0.0, 0.0, 1.0)
    assert intent.post_grasp_retreat.min_distance == 0.10
    assert intent.post_grasp_retreat.desired_distance == 0.20


def test_grasp_intent_embeds_open_and_closed_postures():
    builder = ManipulationIntentBuilder()
    intent = builder.build_grasp_intent("object", "table1")
    assert intent.pre_grasp_posture == builder.build_open_posture()
    assert intent.grasp_posture == builder.build_closed_posture()


def test_place_intent_reference_values():
    builder = ManipulationIntentBuilder()
    intent = builder.build_place_intent("object", "table2")
    assert isinstance(intent, PlaceIntent)
    assert intent.support_surface_id == "table2"
    assert intent.place_pose.frame_id == "wrist_3_link"
    assert intent.place_pose.position == (0.0, 0.5, 0.5)
    x, y, z, w = intent.place_pose.orientation
    assert x == pytest.approx(0.0)
    assert y == pytest.approx(0.0)
    assert z == pytest.approx(math.sqrt(0.5))
    assert w == pytest.approx(math.sqrt(0.5))
    assert intent.pre_place_approach.direction == (0.0, 0.0, -1.0)
    assert intent.pre_place_approach.min_distance == 0.095
    assert intent.pre_place_approach.desired_distance == 0.115
    assert intent.post_place_retreat.direction == (0.0, -1.0, 0.0)
    assert intent.post_place_retreat.min_distance == 0.1
    assert intent.post_place_retreat.desired_distance == 0.25
    assert intent.post_place_posture == builder.build_open_posture()


def test_config_file_matches_reference_constants(configs):
    from_file = ManipulationIntentBuilder(configs["intents"])
    defaults = ManipulationIntentBuilder()
    assert from_file.build_grasp_intent("object", "table1") == defaults.build_grasp_intent("object", "table1")
    assert from_file.build_open_posture() == defaults.build_open_posture()
    assert from_file.build_closed_posture() == defaults.build_closed_posture()
    place_file = from_file.build_place_intent("object", "table2")
    place_default = defaults.build_place_intent("object", "table2")
    assert place_file.place_pose.orientation == pytest.approx(place_default.place_pose.orientation)
    assert place_file.post_place_retreat == place_default.post_place_retreat


def test_each_call_builds_fresh_equal_records():
    builder = ManipulationIntentBuilder()
    a = builder.build_grasp_intent("object", "table1")
    b = builder.build_grasp_intent("object", "table1")
    assert a == b
    assert a is not b


def test_two_finger_gripper_config():
    builder = ManipulationIntentBuilder({"gripper": {
        "joint_names": ["finger_joint1", "finger_joint2"],
        "open_positions": [0.04, 0.04],
        "closed_positions": [0.0, 0.0],
        "time_from_start_s": 0.5,
    }})
    intent = builder.build_grasp_intent("cube", "table1")
    assert intent.pre_grasp_posture.targets == {"finger_joint1": 0.04, "finger_joint2": 0.04}
    assert intent.grasp_posture.targets == {"finger_joint1": 0.0, "finger_joint2": 0.0}


def test_rpy_override_replaces_default_quaternion():
    builder = ManipulationIntentBuilder({"grasp": {"orientation_rpy": [0.0, 0.0, 0.0]}})
    pose = builder.build_grasp_intent("object", "table1").grasp_pose
    assert pose.orientation == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_quaternion_override_replaces_default_rpy():
    builder = ManipulationIntentBuilder({"place": {"orientation_xyzw": [0.0, 0.0, 0.0, 1.0]}})
    pose = builder.build_place_intent("object", "table2").place_pose
    assert pose.orientation == (0.0, 0.0, 0.0, 1.0)


def test_partial_approach_override_keeps_other_defaults():
    builder = ManipulationIntentBuilder({"grasp": {"pre_grasp_approach": {"desired_distance": 0.3}}})
    approach = builder.build_grasp_intent("object", "table1").pre_grasp_approach
    assert approach.desired_distance == 0.3
    assert approach.min_distance == 0.1
    assert approach.direction == (0.0, 0.0, -1.0)


def test_non_unit_grasp_orientation_is_rejected():
    builder = ManipulationIntentBuilder({"grasp": {"orientation_xyzw": [0.5, 0.5, 0.5, 0.6]}})
    with pytest.raises(ConfigurationError):
        builder.build_grasp_intent("object", "table1")


def test_inverted_retreat_distances_are_rejected():
    builder = ManipulationIntentBuilder({"place": {"post_place_retreat": {"min_distance": 0.3}}})
    with pytest.raises(ConfigurationError):
        builder.build_place_intent("object", "table2")


def test_malformed_rpy_is_rejected():
    builder = ManipulationIntentBuilder({"place": {"orientation_rpy": [0.0, 1.0]}})
    with pytest.raises(ConfigurationError):
        builder.build_place_intent("object", "table2")


def test_non_mapping_section_is_rejected():
    with pytest.raises(ConfigurationError):
        ManipulationIntentBuilder({"grasp": [0.4, 0.0, 0.1]})


def test_nan_from_json_config_is_rejected():
    cfg = json.loads('{"grasp": {"pre_grasp_approach": {"min_distance": NaN}}}')
    builder = ManipulationIntentBuilder(cfg)
    with pytest.raises(ConfigurationError):
        builder.build_grasp_intent("object", "table1")


def test_nan_gripper_duration_is_rejected():
    builder = ManipulationIntentBuilder({"gripper": {"time_from_start_s": math.nan}})
    with pytest.raises(ConfigurationError):
        builder.build_open_posture()

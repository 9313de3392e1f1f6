from control.errors import ConfigurationError
from control.transforms import TAU, quaternion_from_rpy
from planning.types import (
    DirectedApproach,
    GraspIntent,
    GripperPosture,
    PlaceIntent,
    Pose,
)


GRIPPER_DEFAULTS = {
    "joint_names": ["gripper_finger1_joint"],
    "open_positions": [0.00],
    "closed_positions": [0.10],
    "time_from_start_s": 2.5,
}

# approach and retreat frames default to the pose frame
GRASP_DEFAULTS = {
    "frame_id": "base_link",
    "position": [0.406, -0.001, 0.15],
    "orientation_xyzw": [-0.5, 0.5, 0.5, 0.5],
    "pre_grasp_approach": {
        "direction": [0.0, 0.0, -1.0],
        "min_distance": 0.1,
        "desired_distance": 0.15,
    },
    "post_grasp_retreat": {
        "direction": [0.0, 0.0, 1.0],
        "min_distance": 0.10,
        "desired_distance": 0.20,
    },
}

PLACE_DEFAULTS = {
    "frame_id": "wrist_3_link",
    "position": [0.0, 0.5, 0.5],
    # quarter turn about z
    "orientation_rpy": [0.0, 0.0, TAU / 4],
    "pre_place_approach": {
        "direction": [0.0, 0.0, -1.0],
        "min_distance": 0.095,
        "desired_distance": 0.115,
    },
    "post_place_retreat": {
        "direction": [0.0, -1.0, 0.0],
        "min_distance": 0.1,
        "desired_distance": 0.25,
    },
}


def _merged(defaults: dict, overrides) -> dict:
    if overrides is None:
        return dict(defaults)
    if not isinstance(overrides, dict):
        raise ConfigurationError(f"Expected a mapping, got {type(overrides).__name__}")
    out = dict(defaults)
    out.update(overrides)
    return out


def _merged_pose_cfg(defaults: dict, overrides) -> dict:
    out = _merged(defaults, overrides)
    overrides = overrides or {}
    # An orientation given in one form replaces the default given in the other.
    if "orientation_xyzw" in overrides and "orientation_rpy" not in overrides:
        out.pop("orientation_rpy", None)
    if "orientation_rpy" in overrides and "orientation_xyzw" not in overrides:
        out.pop("orientation_xyzw", None)
    return out


def _orientation_from_config(cfg: dict):
    if "orientation_xyzw" in cfg:
        return cfg["orientation_xyzw"]
    rpy = cfg.get("orientation_rpy")
    if rpy is None:
        return [0.0, 0.0, 0.0, 1.0]
    try:
        roll, pitch, yaw = (float(a) for a in rpy)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"orientation_rpy needs numeric roll, pitch and yaw: {rpy!r}") from exc
    return quaternion_from_rpy(roll, pitch, yaw)


def _pose_from_config(cfg: dict) -> Pose:
    return Pose(
        frame_id=cfg.get("frame_id", ""),
        position=cfg.get("position", [0.0, 0.0, 0.0]),
        orientation=_orientation_from_config(cfg),
    )


def _approach_from_config(cfg: dict, default_frame: str) -> DirectedApproach:
    return DirectedApproach(
        frame_id=cfg.get("frame_id", default_frame),
        direction=cfg.get("direction", [0.0, 0.0, 0.0]),
        min_distance=cfg.get("min_distance", 0.0),
        desired_distance=cfg.get("desired_distance", 0.0),
    )


class ManipulationIntentBuilder:
    """Turns the configured grasp and place constants into intent records.

    The builder holds configuration only; every call returns freshly built,
    validated records. A malformed configuration raises ConfigurationError
    from the call that needs the bad value.
    """

    def __init__(self, intents_cfg: dict | None = None):
        intents_cfg = intents_cfg or {}
        self.gripper_cfg = _merged(GRIPPER_DEFAULTS, intents_cfg.get("gripper"))
        self.grasp_cfg = _merged_pose_cfg(GRASP_DEFAULTS, intents_cfg.get("grasp"))
        self.place_cfg = _merged_pose_cfg(PLACE_DEFAULTS, intents_cfg.get("place"))

    def _posture(self, key: str) -> GripperPosture:
        return GripperPosture(
            joint_names=self.gripper_cfg.get("joint_names", []),
            positions=self.gripper_cfg.get(key, []),
            time_from_start=self.gripper_cfg.get("time_from_start_s", 0.0),
        )

    def build_open_posture(self) -> GripperPosture:
        return self._posture("open_positions")

    def build_closed_posture(self) -> GripperPosture:
        return self._posture("closed_positions")

    def build_grasp_intent(self, object_id: str, support_surface_id: str) -> GraspIntent:
        cfg = self.grasp_cfg
        frame = cfg.get("frame_id", "")
        approach_cfg = _merged(GRASP_DEFAULTS["pre_grasp_approach"], cfg.get("pre_grasp_approach"))
        retreat_cfg = _merged(GRASP_DEFAULTS["post_grasp_retreat"], cfg.get("post_grasp_retreat"))
        return GraspIntent(
            object_id=object_id,
            grasp_pose=_pose_from_config(cfg),
            pre_grasp_approach=_approach_from_config(approach_cfg, frame),
            post_grasp_retreat=_approach_from_config(retreat_cfg, frame),
            pre_grasp_posture=self.build_open_posture(),
            grasp_posture=self.build_closed_posture(),
            support_surface_id=support_surface_id,
        )

    def build_place_intent(self, object_id: str, support_surface_id: str) -> PlaceIntent:
        cfg = self.place_cfg
        frame = cfg.get("frame_id", "")
        approach_cfg = _merged(PLACE_DEFAULTS["pre_place_approach"], cfg.get("pre_place_approach"))
        retreat_cfg = _merged(PLACE_DEFAULTS["post_place_retreat"], cfg.get("post_place_retreat"))
        return PlaceIntent(
            object_id=object_id,
            place_pose=_pose_from_config(cfg),
            pre_place_approach=_approach_from_config(approach_cfg, frame),
            post_place_retreat=_approach_from_config(retreat_cfg, frame),
            post_place_posture=self.build_open_posture(),
            support_surface_id=support_surface_id,
        )

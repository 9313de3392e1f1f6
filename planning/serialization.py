"""JSON persistence for grasp and place intents.

Records are written as plain dicts tagged with ``kind``. Decoding goes through
the dataclass constructors, so a stored intent that violates a pose or approach
invariant is rejected on load.
"""

import json

from control.errors import ConfigurationError
from planning.types import (
    DirectedApproach,
    GraspIntent,
    GripperPosture,
    PlaceIntent,
    Pose,
)


def _pose_to_dict(pose: Pose) -> dict:
    return {
        "frame_id": pose.frame_id,
        "position": list(pose.position),
        "orientation_xyzw": list(pose.orientation),
    }


def _pose_from_dict(data: dict) -> Pose:
    return Pose(
        frame_id=data["frame_id"],
        position=data["position"],
        orientation=data["orientation_xyzw"],
    )


def _approach_to_dict(approach: DirectedApproach) -> dict:
    return {
        "frame_id": approach.frame_id,
        "direction": list(approach.direction),
        "min_distance": approach.min_distance,
        "desired_distance": approach.desired_distance,
    }


def _approach_from_dict(data: dict) -> DirectedApproach:
    return DirectedApproach(
        frame_id=data["frame_id"],
        direction=data["direction"],
        min_distance=data["min_distance"],
        desired_distance=data["desired_distance"],
    )


def _posture_to_dict(posture: GripperPosture) -> dict:
    return {
        "joint_names": list(posture.joint_names),
        "positions": list(posture.positions),
        "time_from_start_s": posture.time_from_start,
    }


def _posture_from_dict(data: dict) -> GripperPosture:
    return GripperPosture(
        joint_names=data["joint_names"],
        positions=data["positions"],
        time_from_start=data["time_from_start_s"],
    )


def intent_to_dict(intent) -> dict:
    if isinstance(intent, GraspIntent):
        return {
            "kind": "grasp",
            "object_id": intent.object_id,
            "support_surface_id": intent.support_surface_id,
            "grasp_pose": _pose_to_dict(intent.grasp_pose),
            "pre_grasp_approach": _approach_to_dict(intent.pre_grasp_approach),
            "post_grasp_retreat": _approach_to_dict(intent.post_grasp_retreat),
            "pre_grasp_posture": _posture_to_dict(intent.pre_grasp_posture),
            "grasp_posture": _posture_to_dict(intent.grasp_posture),
        }
    if isinstance(intent, PlaceIntent):
        return {
            "kind": "place",
            "object_id": intent.object_id,
            "support_surface_id": intent.support_surface_id,
            "place_pose": _pose_to_dict(intent.place_pose),
            "pre_place_approach": _approach_to_dict(intent.pre_place_approach),
            "post_place_retreat": _approach_to_dict(intent.post_place_retreat),
            "post_place_posture": _posture_to_dict(intent.post_place_posture),
        }
    raise TypeError(f"Not an intent: {type(intent).__name__}")


def _section(data: dict, key: str) -> dict:
    value = data[key]
    if not isinstance(value, dict):
        raise ConfigurationError(f"Intent field '{key}' must be an object, got {type(value).__name__}")
    return value


def intent_from_dict(data: dict):
    if not isinstance(data, dict):
        raise ConfigurationError(f"Intent record must be an object, got {type(data).__name__}")
    kind = data.get("kind")
    try:
        if kind == "grasp":
            return GraspIntent(
                object_id=data["object_id"],
                grasp_pose=_pose_from_dict(_section(data, "grasp_pose")),
                pre_grasp_approach=_approach_from_dict(_section(data, "pre_grasp_approach")),
                post_grasp_retreat=_approach_from_dict(_section(data, "post_grasp_retreat")),
                pre_grasp_posture=_posture_from_dict(_section(data, "pre_grasp_posture")),
                grasp_posture=_posture_from_dict(_section(data, "grasp_posture")),
                support_surface_id=data["support_surface_id"],
            )
        if kind == "place":
            return PlaceIntent(
                object_id=data["object_id"],
                place_pose=_pose_from_dict(_section(data, "place_pose")),
                pre_place_approach=_approach_from_dict(_section(data, "pre_place_approach")),
                post_place_retreat=_approach_from_dict(_section(data, "post_place_retreat")),
                post_place_posture=_posture_from_dict(_section(data, "post_place_posture")),
                support_surface_id=data["support_surface_id"],
            )
    except KeyError as exc:
        raise ConfigurationError(f"Intent record is missing field {exc}") from exc
    except TypeError as exc:
        raise ConfigurationError(f"Malformed intent record: {exc}") from exc
    raise ConfigurationError(f"Unknown intent kind: {kind!r}")


def save_intent(path: str, intent) -> str:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(intent_to_dict(intent), f, indent=2, ensure_ascii=True)
    return path


def load_intent(path: str):
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            data = json.load(f)
    except OSError as exc:
        raise ConfigurationError(f"Cannot read intent file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    return intent_from_dict(data)

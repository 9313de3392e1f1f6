import math
from dataclasses import dataclass
from typing import Dict, Tuple

from control.errors import ConfigurationError
from control.transforms import quaternion_norm, vector_norm


UNIT_TOLERANCE = 1e-6


def _as_floats(values, name: str, count: int | None = None) -> Tuple[float, ...]:
    try:
        out = tuple(float(v) for v in values)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{name} must be numeric: {values!r}") from exc
    if count is not None and len(out) != count:
        raise ConfigurationError(f"{name} needs {count} components, got {len(out)}")
    if not all(math.isfinite(v) for v in out):
        raise ConfigurationError(f"{name} must be finite: {values!r}")
    return out


def _as_float(value, name: str) -> float:
    return _as_floats([value], name)[0]


def _is_unit(norm: float) -> bool:
    return abs(norm - 1.0) <= UNIT_TOLERANCE


@dataclass(frozen=True)
class Pose:
    frame_id: str
    position: Tuple[float, float, float]
    orientation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)

    def __post_init__(self):
        if not self.frame_id:
            raise ConfigurationError("Pose needs a reference frame")
        position = _as_floats(self.position, "position", 3)
        orientation = _as_floats(self.orientation, "orientation (x, y, z, w)", 4)
        norm = quaternion_norm(orientation)
        if not _is_unit(norm):
            raise ConfigurationError(f"orientation is not a unit quaternion (norm={norm:.9f})")
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "orientation", orientation)


@dataclass(frozen=True)
class DirectedApproach:
    """Linear approach or retreat along `direction`, expressed in `frame_id`."""

    frame_id: str
    direction: Tuple[float, float, float]
    min_distance: float
    desired_distance: float

    def __post_init__(self):
        if not self.frame_id:
            raise ConfigurationError("Approach direction needs a reference frame")
        direction = _as_floats(self.direction, "direction", 3)
        norm = vector_norm(direction)
        if not _is_unit(norm):
            raise ConfigurationError(f"direction is not a unit vector (norm={norm:.9f})")
        min_distance = _as_float(self.min_distance, "min_distance")
        desired_distance = _as_float(self.desired_distance, "desired_distance")
        if min_distance < 0.0 or desired_distance < 0.0:
            raise ConfigurationError("Approach distances must be non-negative")
        if desired_distance < min_distance:
            raise ConfigurationError(
                f"desired_distance {desired_distance} is below min_distance {min_distance}"
            )
        object.__setattr__(self, "direction", direction)
        object.__setattr__(self, "min_distance", min_distance)
        object.__setattr__(self, "desired_distance", desired_distance)


@dataclass(frozen=True)
class GripperPosture:
    joint_names: Tuple[str, ...]
    positions: Tuple[float, ...]
    time_from_start: float

    def __post_init__(self):
        if isinstance(self.joint_names, str):
            raise ConfigurationError(f"joint_names must be a list of names, got {self.joint_names!r}")
        try:
            names = tuple(self.joint_names)
        except TypeError as exc:
            raise ConfigurationError(f"joint_names must be a list of names: {exc}") from exc
        if not all(isinstance(n, str) and n for n in names):
            raise ConfigurationError(f"Gripper joint names must be non-empty strings: {names!r}")
        positions = _as_floats(self.positions, "gripper positions")
        duration = _as_float(self.time_from_start, "time_from_start")
        if not names:
            raise ConfigurationError("Gripper posture needs at least one joint")
        if len(names) != len(positions):
            raise ConfigurationError("Gripper posture joint names and positions differ in length")
        if len(set(names)) != len(names):
            raise ConfigurationError("Gripper posture joint names must be unique")
        if duration < 0.0:
            raise ConfigurationError("Gripper posture duration must be non-negative")
        object.__setattr__(self, "joint_names", names)
        object.__setattr__(self, "positions", positions)
        object.__setattr__(self, "time_from_start", duration)

    @property
    def targets(self) -> Dict[str, float]:
        return dict(zip(self.joint_names, self.positions))


@dataclass(frozen=True)
class GraspIntent:
    object_id: str
    grasp_pose: Pose
    pre_grasp_approach: DirectedApproach
    post_grasp_retreat: DirectedApproach
    pre_grasp_posture: GripperPosture
    grasp_posture: GripperPosture
    support_surface_id: str


@dataclass(frozen=True)
class PlaceIntent:
    object_id: str
    place_pose: Pose
    pre_place_approach: DirectedApproach
    post_place_retreat: DirectedApproach
    post_place_posture: GripperPosture
    support_surface_id: str


@dataclass(frozen=True)
class CollisionBox:
    object_id: str
    pose: Pose
    dimensions: Tuple[float, float, float]

    def __post_init__(self):
        if not self.object_id:
            raise ConfigurationError("Collision object needs an id")
        dims = _as_floats(self.dimensions, "dimensions", 3)
        if any(d <= 0.0 for d in dims):
            raise ConfigurationError(f"Box dimensions must be positive: {dims}")
        object.__setattr__(self, "dimensions", dims)

from typing import List

from control.errors import ConfigurationError
from planning.types import CollisionBox, Pose


def build_collision_objects(scene_cfg: dict) -> List[CollisionBox]:
    objects = []
    for entry in scene_cfg.get("collision_objects", []):
        if not entry.get("enabled", True):
            continue
        if "id" not in entry:
            raise ConfigurationError("Collision object entry is missing an id")
        pose = Pose(
            frame_id=entry.get("frame_id", "world"),
            position=entry.get("position", [0.0, 0.0, 0.0]),
            orientation=entry.get("orientation_xyzw", [0.0, 0.0, 0.0, 1.0]),
        )
        objects.append(CollisionBox(
            object_id=entry["id"],
            pose=pose,
            dimensions=entry.get("dimensions", [0.0, 0.0, 0.0]),
        ))
    return objects

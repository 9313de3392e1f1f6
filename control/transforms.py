import math

import numpy as np


TAU = 2.0 * math.pi


def vector_norm(v) -> float:
    return float(np.linalg.norm(np.asarray(v, dtype=float)))


def quaternion_norm(q) -> float:
    return vector_norm(q)


def quaternion_from_rpy(roll: float, pitch: float, yaw: float):
    """Quaternion (x, y, z, w) for fixed-axis roll, pitch, yaw in radians."""
    cr, sr = math.cos(roll * 0.5), math.sin(roll * 0.5)
    cp, sp = math.cos(pitch * 0.5), math.sin(pitch * 0.5)
    cy, sy = math.cos(yaw * 0.5), math.sin(yaw * 0.5)
    return [
        sr * cp * cy - cr * sp * sy,
        cr * sp * cy + sr * cp * sy,
        cr * cp * sy - sr * sp * cy,
        cr * cp * cy + sr * sp * sy,
    ]


def rotation_matrix_from_quaternion(q):
    x, y, z, w = (float(c) for c in q)
    n = x * x + y * y + z * z + w * w
    if n < 1e-9:
        return np.eye(3)
    s = 2.0 / n
    xx, yy, zz = x * x * s, y * y * s, z * z * s
    xy, xz, yz = x * y * s, x * z * s, y * z * s
    wx, wy, wz = w * x * s, w * y * s, w * z * s
    return np.array([
        [1.0 - (yy + zz), xy - wz, xz + wy],
        [xy + wz, 1.0 - (xx + zz), yz - wx],
        [xz - wy, yz + wx, 1.0 - (xx + yy)],
    ])


def turns_to_radians(turns):
    return [float(t) * TAU for t in turns]

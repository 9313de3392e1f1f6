import math

import numpy as np
import pytest

from control.transforms import (
    TAU,
    quaternion_from_rpy,
    quaternion_norm,
    rotation_matrix_from_quaternion,
    turns_to_radians,
)


def test_quarter_turn_about_z():
    q = quaternion_from_rpy(0.0, 0.0, TAU / 4)
    assert q == pytest.approx([0.0, 0.0, math.sqrt(0.5), math.sqrt(0.5)])
    assert quaternion_norm(q) == pytest.approx(1.0)


def test_rpy_quaternion_matches_rotation_matrix():
    q = quaternion_from_rpy(0.3, -0.2, 1.1)
    R = rotation_matrix_from_quaternion(q)
    cr, sr = math.cos(0.3), math.sin(0.3)
    cp, sp = math.cos(-0.2), math.sin(-0.2)
    cy, sy = math.cos(1.1), math.sin(1.1)
    Rz = np.array([[cy, -sy, 0], [sy, cy, 0], [0, 0, 1]])
    Ry = np.array([[cp, 0, sp], [0, 1, 0], [-sp, 0, cp]])
    Rx = np.array([[1, 0, 0], [0, cr, -sr], [0, sr, cr]])
    assert np.allclose(R, Rz @ Ry @ Rx)


def test_ready_turns():
    joints = turns_to_radians([0.0, -0.25, 0.25, -0.25, -0.25, 0.0])
    assert joints == pytest.approx([0.0, -math.pi / 2, math.pi / 2, -math.pi / 2, -math.pi / 2, 0.0])

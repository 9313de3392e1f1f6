#!/usr/bin/env python3
"""Render the configured grasp and place intents to an image.

Each target pose is drawn with its orientation triad, the approach segment
ending at the pose and the retreat segment leaving it. Poses are drawn in
their own frames without transforming between them.

Usage:
  python tools/plot_intents.py --out intents.png
"""

from __future__ import annotations

import argparse
import os
import sys

import numpy as np
from matplotlib.figure import Figure

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from control.config import load_all_configs
from control.transforms import rotation_matrix_from_quaternion
from planning.intent_builder import ManipulationIntentBuilder

AXIS_LEN = 0.05
AXIS_COLORS = ("tab:red", "tab:green", "tab:blue")


def _draw_pose(ax, pose, label):
    p = np.asarray(pose.position, dtype=float)
    R = rotation_matrix_from_quaternion(pose.orientation)
    for i, color in enumerate(AXIS_COLORS):
        end = p + R[:, i] * AXIS_LEN
        ax.plot([p[0], end[0]], [p[1], end[1]], [p[2], end[2]], color=color)
    ax.scatter([p[0]], [p[1]], [p[2]], color="k")
    ax.text(p[0], p[1], p[2], f" {label} ({pose.frame_id})")


def _draw_segment(ax, pose, approach, incoming: bool, color):
    p = np.asarray(pose.position, dtype=float)
    d = np.asarray(approach.direction, dtype=float) * approach.desired_distance
    start, end = (p - d, p) if incoming else (p, p + d)
    ax.plot([start[0], end[0]], [start[1], end[1]], [start[2], end[2]], linestyle="--", color=color)


def render(grasp, place, out_path: str) -> str:
    fig = Figure(figsize=(7, 6))
    ax = fig.add_subplot(111, projection="3d")
    _draw_pose(ax, grasp.grasp_pose, "grasp")
    _draw_segment(ax, grasp.grasp_pose, grasp.pre_grasp_approach, True, "tab:orange")
    _draw_segment(ax, grasp.grasp_pose, grasp.post_grasp_retreat, False, "tab:purple")
    _draw_pose(ax, place.place_pose, "place")
    _draw_segment(ax, place.place_pose, place.pre_place_approach, True, "tab:orange")
    _draw_segment(ax, place.place_pose, place.post_place_retreat, False, "tab:purple")
    ax.set_xlabel("x [m]")
    ax.set_ylabel("y [m]")
    ax.set_zlabel("z [m]")
    ax.set_title(f"{grasp.object_id}: {grasp.support_surface_id} -> {place.support_surface_id}")
    fig.savefig(out_path, dpi=120)
    return out_path


def main() -> int:
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-dir", default=REPO_ROOT)
    parser.add_argument("--out", default="intents.png")
    args = parser.parse_args()

    configs = load_all_configs(args.base_dir)
    system = configs["system"]
    builder = ManipulationIntentBuilder(configs["intents"])
    object_id = system.get("object_id", "object")
    grasp = builder.build_grasp_intent(object_id, system.get("pick_support_surface", "table1"))
    place = builder.build_place_intent(object_id, system.get("place_support_surface", "table2"))
    print("Wrote", render(grasp, place, args.out))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

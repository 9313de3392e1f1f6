#!/usr/bin/env python3
"""Project smoke checks (no ROS, no hardware).

Runs:
- Full mock sequence with pick and place
- Intent JSON round trip
"""

from __future__ import annotations

import os
import sys
import tempfile

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from control.app import build_sequence
from control.config import load_all_configs
from control.planning_service import MockPlanningService
from planning.serialization import load_intent, save_intent


def _run_mock_sequence(repo_root: str):
    configs = load_all_configs(repo_root)
    configs["system"]["run_place"] = True
    service = MockPlanningService()
    report = build_sequence(service, configs, sleep=lambda _s: None).run()
    if not report.success:
        raise RuntimeError(f"Mock sequence failed at {report.failed_step}: {report.message}")
    expected = ["apply_collision_objects", "move_to_joint_target", "submit_grasp", "submit_placement"]
    if service.calls() != expected:
        raise RuntimeError(f"Unexpected service calls: {service.calls()}")
    return report


def _run_round_trip(report) -> None:
    with tempfile.TemporaryDirectory(prefix="intent_smoke_") as tmp:
        for name, intent in (("grasp", report.grasp_intent), ("place", report.place_intent)):
            path = save_intent(os.path.join(tmp, f"{name}.json"), intent)
            if load_intent(path) != intent:
                raise RuntimeError(f"{name} intent changed in JSON round trip")


def main() -> int:
    report = _run_mock_sequence(REPO_ROOT)
    _run_round_trip(report)
    print("Smoke checks passed: mock sequence (scene, ready, pick, place) + intent round trip.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

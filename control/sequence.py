import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from control.errors import PickPlaceError
from control.planning_service import FAILURE, SUCCESS, ServiceResult
from control.transforms import turns_to_radians


logger = logging.getLogger(__name__)

DEFAULT_READY_TURNS = [0.0, -0.25, 0.25, -0.25, -0.25, 0.0]


class Step(str, Enum):
    SCENE = "SCENE"
    READY = "READY"
    PICK = "PICK"
    PLACE = "PLACE"


@dataclass
class SequenceReport:
    success: bool = False
    completed: List[Step] = field(default_factory=list)
    failed_step: Optional[Step] = None
    error_code: int = SUCCESS
    message: str = ""
    grasp_intent: object = None
    place_intent: object = None


def ready_joint_target(robot_cfg: dict):
    if "ready_joints_rad" in robot_cfg:
        return [float(j) for j in robot_cfg["ready_joints_rad"]]
    return turns_to_radians(robot_cfg.get("ready_joints_turns", DEFAULT_READY_TURNS))


class PickPlaceSequence:
    """Scene setup, ready pose, pick and optional place, run once in order.

    There are no retries. The first failing step ends the run and its error
    code is carried in the report. A failed ready move is only logged, the
    pick is still attempted from wherever the arm is.
    """

    def __init__(self, service, builder, scene_objects, system_cfg: dict, robot_cfg: dict, sleep=time.sleep):
        self.service = service
        self.builder = builder
        self.scene_objects = list(scene_objects)
        self.system_cfg = system_cfg
        self.robot_cfg = robot_cfg
        self.sleep = sleep
        self.delays = system_cfg.get("delays_s", {})
        self.object_id = system_cfg.get("object_id", "object")

    def _settle(self, key: str):
        delay = float(self.delays.get(key, 0.0))
        if delay > 0.0:
            self.sleep(delay)

    def _call(self, fn) -> ServiceResult:
        try:
            return fn()
        except PickPlaceError as exc:
            return ServiceResult(success=False, error_code=FAILURE, message=str(exc))

    def _apply_scene(self, report: SequenceReport) -> ServiceResult:
        return self.service.apply_collision_objects(self.scene_objects)

    def _ready(self, report: SequenceReport) -> ServiceResult:
        return self.service.move_to_joint_target(ready_joint_target(self.robot_cfg))

    def _pick(self, report: SequenceReport) -> ServiceResult:
        report.grasp_intent = self.builder.build_grasp_intent(
            self.object_id,
            self.system_cfg.get("pick_support_surface", "table1"),
        )
        return self.service.submit_grasp(report.grasp_intent)

    def _place(self, report: SequenceReport) -> ServiceResult:
        report.place_intent = self.builder.build_place_intent(
            self.object_id,
            self.system_cfg.get("place_support_surface", "table2"),
        )
        return self.service.submit_placement(report.place_intent)

    def steps(self):
        out = [
            (Step.SCENE, self._apply_scene, "after_scene"),
            (Step.READY, self._ready, "after_ready"),
            (Step.PICK, self._pick, "after_pick"),
        ]
        if self.system_cfg.get("run_place", False):
            out.append((Step.PLACE, self._place, None))
        return out

    def run(self) -> SequenceReport:
        report = SequenceReport()
        for step, fn, delay_key in self.steps():
            logger.info("Step %s", step.value)
            result = self._call(lambda: fn(report))
            if not result.success:
                if step == Step.READY:
                    logger.warning("Ready pose not reached (%s): %s", result.error_name, result.message)
                else:
                    logger.error("Step %s failed with %s: %s", step.value, result.error_name, result.message)
                    report.failed_step = step
                    report.error_code = result.error_code
                    report.message = result.message
                    return report
            else:
                report.completed.append(step)
            if delay_key:
                self._settle(delay_key)
        report.success = True
        logger.info("Sequence finished: %s", ", ".join(s.value for s in report.completed))
        return report

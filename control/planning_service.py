from dataclasses import dataclass


# moveit_msgs/MoveItErrorCodes
MOVEIT_ERROR_CODES = {
    1: "SUCCESS",
    99999: "FAILURE",
    -1: "PLANNING_FAILED",
    -2: "INVALID_MOTION_PLAN",
    -3: "MOTION_PLAN_INVALIDATED_BY_ENVIRONMENT_CHANGE",
    -4: "CONTROL_FAILED",
    -5: "UNABLE_TO_AQUIRE_SENSOR_DATA",
    -6: "TIMED_OUT",
    -7: "PREEMPTED",
    -10: "START_STATE_IN_COLLISION",
    -11: "START_STATE_VIOLATES_PATH_CONSTRAINTS",
    -12: "GOAL_IN_COLLISION",
    -13: "GOAL_VIOLATES_PATH_CONSTRAINTS",
    -14: "GOAL_CONSTRAINTS_VIOLATED",
    -15: "INVALID_GROUP_NAME",
    -16: "INVALID_GOAL_CONSTRAINTS",
    -17: "INVALID_ROBOT_STATE",
    -18: "INVALID_LINK_NAME",
    -19: "INVALID_OBJECT_NAME",
    -21: "FRAME_TRANSFORM_FAILURE",
    -22: "COLLISION_CHECKING_UNAVAILABLE",
    -23: "ROBOT_STATE_STALE",
    -24: "SENSOR_INFO_STALE",
    -25: "COMMUNICATION_FAILURE",
    -31: "NO_IK_SOLUTION",
}

SUCCESS = 1
FAILURE = 99999
PLANNING_FAILED = -1
INVALID_OBJECT_NAME = -19


def describe_error_code(code: int) -> str:
    return MOVEIT_ERROR_CODES.get(int(code), f"UNKNOWN({int(code)})")


@dataclass(frozen=True)
class ServiceResult:
    success: bool
    error_code: int = SUCCESS
    message: str = ""

    @classmethod
    def from_error_code(cls, code: int, message: str = ""):
        code = int(code)
        return cls(success=code == SUCCESS, error_code=code, message=message or describe_error_code(code))

    @property
    def error_name(self) -> str:
        return describe_error_code(self.error_code)


class PlanningServiceInterface:
    """Narrow boundary to the external motion planning and execution service."""

    def apply_collision_objects(self, objects) -> ServiceResult:
        raise NotImplementedError

    def move_to_joint_target(self, joints) -> ServiceResult:
        raise NotImplementedError

    def submit_grasp(self, intent) -> ServiceResult:
        raise NotImplementedError

    def submit_placement(self, intent) -> ServiceResult:
        raise NotImplementedError


class MockPlanningService(PlanningServiceInterface):
    def __init__(self, failures: dict | None = None):
        # operation name -> error code to report instead of SUCCESS
        self.failures = dict(failures or {})
        self.history = []
        self.scene_objects = {}
        self.joint_positions = None
        self.held_object = None

    def _result(self, operation: str) -> ServiceResult:
        code = int(self.failures.get(operation, SUCCESS))
        return ServiceResult.from_error_code(code)

    def apply_collision_objects(self, objects) -> ServiceResult:
        objects = list(objects)
        self.history.append(("apply_collision_objects", objects))
        result = self._result("apply_collision_objects")
        if result.success:
            for obj in objects:
                self.scene_objects[obj.object_id] = obj
        return result

    def move_to_joint_target(self, joints) -> ServiceResult:
        joints = [float(j) for j in joints]
        self.history.append(("move_to_joint_target", joints))
        result = self._result("move_to_joint_target")
        if result.success:
            self.joint_positions = joints
        return result

    def submit_grasp(self, intent) -> ServiceResult:
        self.history.append(("submit_grasp", intent))
        if intent.object_id not in self.scene_objects:
            return ServiceResult.from_error_code(INVALID_OBJECT_NAME, f"Unknown object '{intent.object_id}'")
        result = self._result("submit_grasp")
        if result.success:
            self.held_object = intent.object_id
        return result

    def submit_placement(self, intent) -> ServiceResult:
        self.history.append(("submit_placement", intent))
        if self.held_object != intent.object_id:
            return ServiceResult.from_error_code(INVALID_OBJECT_NAME, f"Object '{intent.object_id}' is not attached")
        result = self._result("submit_placement")
        if result.success:
            self.held_object = None
        return result

    def calls(self):
        return [name for name, _ in self.history]

import contextlib
import logging
import sys
from types import SimpleNamespace

from control.errors import BackendUnavailableError
from control.planning_service import (
    FAILURE,
    PLANNING_FAILED,
    SUCCESS,
    PlanningServiceInterface,
    ServiceResult,
)


logger = logging.getLogger(__name__)


def load_ros():
    """Import the ROS / MoveIt Python libraries on demand."""
    try:
        import rospy
        import moveit_commander
        from geometry_msgs.msg import PoseStamped
        from moveit_msgs.msg import Grasp, GripperTranslation, PlaceLocation
        from trajectory_msgs.msg import JointTrajectory, JointTrajectoryPoint
    except ImportError as exc:
        raise BackendUnavailableError(
            f"MoveIt backend needs a sourced ROS environment with moveit_commander: {exc}"
        ) from exc
    return SimpleNamespace(
        rospy=rospy,
        moveit_commander=moveit_commander,
        PoseStamped=PoseStamped,
        Grasp=Grasp,
        GripperTranslation=GripperTranslation,
        PlaceLocation=PlaceLocation,
        JointTrajectory=JointTrajectory,
        JointTrajectoryPoint=JointTrajectoryPoint,
    )


@contextlib.contextmanager
def ros_session(node_name: str, argv=None, ros=None):
    ros = ros or load_ros()
    ros.moveit_commander.roscpp_initialize(list(argv if argv is not None else sys.argv))
    try:
        ros.rospy.init_node(node_name, anonymous=True)
        logger.info("ROS node '%s' started", node_name)
        yield ros
    finally:
        ros.moveit_commander.roscpp_shutdown()
        logger.info("ROS node '%s' shut down", node_name)


def pose_to_msg(pose, ros):
    msg = ros.PoseStamped()
    msg.header.frame_id = pose.frame_id
    msg.pose.position.x, msg.pose.position.y, msg.pose.position.z = pose.position
    o = msg.pose.orientation
    o.x, o.y, o.z, o.w = pose.orientation
    return msg


def approach_to_msg(approach, ros):
    msg = ros.GripperTranslation()
    msg.direction.header.frame_id = approach.frame_id
    v = msg.direction.vector
    v.x, v.y, v.z = approach.direction
    msg.min_distance = approach.min_distance
    msg.desired_distance = approach.desired_distance
    return msg


def posture_to_msg(posture, ros):
    msg = ros.JointTrajectory()
    msg.joint_names = list(posture.joint_names)
    point = ros.JointTrajectoryPoint()
    point.positions = list(posture.positions)
    point.time_from_start = ros.rospy.Duration(posture.time_from_start)
    msg.points = [point]
    return msg


def grasp_to_msg(intent, ros):
    msg = ros.Grasp()
    msg.grasp_pose = pose_to_msg(intent.grasp_pose, ros)
    msg.pre_grasp_approach = approach_to_msg(intent.pre_grasp_approach, ros)
    msg.post_grasp_retreat = approach_to_msg(intent.post_grasp_retreat, ros)
    msg.pre_grasp_posture = posture_to_msg(intent.pre_grasp_posture, ros)
    msg.grasp_posture = posture_to_msg(intent.grasp_posture, ros)
    return msg


def place_to_msg(intent, ros):
    msg = ros.PlaceLocation()
    msg.place_pose = pose_to_msg(intent.place_pose, ros)
    msg.pre_place_approach = approach_to_msg(intent.pre_place_approach, ros)
    msg.post_place_retreat = approach_to_msg(intent.post_place_retreat, ros)
    msg.post_place_posture = posture_to_msg(intent.post_place_posture, ros)
    return msg


def _error_code_value(result) -> int:
    if isinstance(result, bool):
        return SUCCESS if result else FAILURE
    if hasattr(result, "val"):
        return int(result.val)
    return int(result)


class MoveItPlanningService(PlanningServiceInterface):
    """Planning service backed by a MoveIt move_group node."""

    def __init__(self, robot_cfg: dict, ros=None):
        self.ros = ros or load_ros()
        commander = self.ros.moveit_commander
        self.scene = commander.PlanningSceneInterface()
        self.group = commander.MoveGroupCommander(robot_cfg.get("group_name", "arm"))
        self.group.set_planning_time(float(robot_cfg.get("planning_time_s", 10.0)))
        self.group.set_max_velocity_scaling_factor(float(robot_cfg.get("max_velocity_scaling", 0.05)))
        self.group.set_max_acceleration_scaling_factor(float(robot_cfg.get("max_acceleration_scaling", 0.05)))
        ee_link = robot_cfg.get("end_effector_link")
        if ee_link:
            self.group.set_end_effector_link(ee_link)

    def apply_collision_objects(self, objects) -> ServiceResult:
        for obj in objects:
            self.scene.add_box(obj.object_id, pose_to_msg(obj.pose, self.ros), size=obj.dimensions)
            logger.debug("Added collision box '%s' in frame %s", obj.object_id, obj.pose.frame_id)
        return ServiceResult.from_error_code(SUCCESS)

    def move_to_joint_target(self, joints) -> ServiceResult:
        current = self.group.get_current_joint_values()
        target = list(current)
        for i, value in enumerate(joints):
            if i < len(target):
                target[i] = float(value)
        self.group.set_joint_value_target(target)

        plan = self.group.plan()
        # noetic returns (success, trajectory, planning_time, error_code)
        if isinstance(plan, tuple):
            planned = bool(plan[0])
        else:
            planned = bool(getattr(plan, "joint_trajectory", None) and plan.joint_trajectory.points)
        logger.info("Visualizing plan (joint space ready) %s", "succeeded" if planned else "FAILED")

        moved = self.group.go(wait=True)
        self.group.stop()
        if not moved:
            return ServiceResult.from_error_code(PLANNING_FAILED, "Ready pose motion failed")
        return ServiceResult.from_error_code(SUCCESS)

    def submit_grasp(self, intent) -> ServiceResult:
        self.group.set_support_surface_name(intent.support_surface_id)
        code = _error_code_value(self.group.pick(intent.object_id, [grasp_to_msg(intent, self.ros)]))
        return ServiceResult.from_error_code(code)

    def submit_placement(self, intent) -> ServiceResult:
        self.group.set_support_surface_name(intent.support_surface_id)
        code = _error_code_value(self.group.place(intent.object_id, [place_to_msg(intent, self.ros)]))
        return ServiceResult.from_error_code(code)

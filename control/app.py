import argparse
import contextlib
import logging
import os
import time

from control.config import load_all_configs
from control.errors import PickPlaceError
from control.planning_service import MockPlanningService
from control.scene import build_collision_objects
from control.sequence import PickPlaceSequence
from planning.intent_builder import ManipulationIntentBuilder
from planning.serialization import save_intent


logger = logging.getLogger(__name__)

def _default_base_dir():
    # source checkout first, then the working directory for installed copies
    candidates = [
        os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir)),
        os.getcwd(),
    ]
    for base in candidates:
        if os.path.isdir(os.path.join(base, "configs")):
            return base
    return candidates[0]


DEFAULT_BASE_DIR = _default_base_dir()


@contextlib.contextmanager
def open_service(backend: str, configs: dict, sleep=time.sleep):
    if backend == "mock":
        yield MockPlanningService()
        return
    if backend != "moveit":
        raise PickPlaceError(f"Unknown backend '{backend}'")

    from control.moveit_service import MoveItPlanningService, ros_session

    system_cfg = configs["system"]
    with ros_session(system_cfg.get("node_name", "ur5_arm_pick_place")) as ros:
        # let the node connect before talking to move_group
        sleep(float(system_cfg.get("delays_s", {}).get("after_init", 0.0)))
        yield MoveItPlanningService(configs["robot"], ros=ros)


def build_sequence(service, configs: dict, sleep=time.sleep):
    builder = ManipulationIntentBuilder(configs.get("intents", {}))
    scene_objects = build_collision_objects(configs.get("scene", {}))
    return PickPlaceSequence(
        service=service,
        builder=builder,
        scene_objects=scene_objects,
        system_cfg=configs.get("system", {}),
        robot_cfg=configs.get("robot", {}),
        sleep=sleep,
    )


def dump_intents(report, out_dir: str):
    os.makedirs(out_dir, exist_ok=True)
    written = []
    if report.grasp_intent is not None:
        written.append(save_intent(os.path.join(out_dir, "grasp_intent.json"), report.grasp_intent))
    if report.place_intent is not None:
        written.append(save_intent(os.path.join(out_dir, "place_intent.json"), report.place_intent))
    return written


def run(base_dir: str = DEFAULT_BASE_DIR, backend: str = "mock", run_place=None, dump_dir=None, sleep=None):
    sleep = sleep or time.sleep
    configs = load_all_configs(base_dir)
    if run_place is not None:
        configs["system"]["run_place"] = bool(run_place)
    with open_service(backend, configs, sleep=sleep) as service:
        report = build_sequence(service, configs, sleep=sleep).run()
    if dump_dir:
        for path in dump_intents(report, dump_dir):
            logger.info("Wrote %s", path)
    return report


def build_arg_parser():
    parser = argparse.ArgumentParser(description="Pick (and optionally place) an object with MoveIt.")
    parser.add_argument("--base-dir", default=DEFAULT_BASE_DIR, help="Directory holding configs/.")
    parser.add_argument("--backend", choices=["mock", "moveit"], default="moveit")
    place = parser.add_mutually_exclusive_group()
    place.add_argument("--place", dest="run_place", action="store_true", default=None,
                       help="Place the object after picking it.")
    place.add_argument("--no-place", dest="run_place", action="store_false",
                       help="Stop after the pick.")
    parser.add_argument("--dump-intents", metavar="DIR", help="Write the built intents as JSON to DIR.")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        report = run(
            base_dir=args.base_dir,
            backend=args.backend,
            run_place=args.run_place,
            dump_dir=args.dump_intents,
        )
    except PickPlaceError as exc:
        logger.error("%s", exc)
        return 1
    if not report.success:
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

import json
import os

from control.errors import ConfigurationError


CONFIG_FILES = {
    "system": os.path.join("configs", "system.json"),
    "robot": os.path.join("configs", "robot.json"),
    "scene": os.path.join("configs", "scene.json"),
    "intents": os.path.join("configs", "intents.json"),
}


def load_config(path: str):
    try:
        with open(path, "r", encoding="utf-8-sig") as f:
            content = f.read()
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must hold a JSON object")
    return data


def load_all_configs(base_dir: str):
    configs = {}
    for key, rel_path in CONFIG_FILES.items():
        path = os.path.join(base_dir, rel_path)
        configs[key] = load_config(path)
    return configs

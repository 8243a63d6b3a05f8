import os
from pathlib import Path

from ragbot.util.yaml import load_yaml_config

PROJECT_ROOT = Path(os.environ.get("RAGBOT_ROOT", Path.cwd()))

__all__ = ["PROJECT_ROOT", "load_yaml_config"]

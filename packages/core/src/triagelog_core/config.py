import os
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG_PATH = ".triagelog.yml"

DEFAULT_CONFIG: dict = {
    "docs_pattern": "*.md",
    "max_workers": 1,
    "store": "noop",  # "noop" | "sqlite" | "json"
    "store_path": None,  # None = backend default (.triagelog.db / triagelog_history.json)
    "log_level": "WARNING",
}


def load_config(config_path: str = DEFAULT_CONFIG_PATH, cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .triagelog.yml in the current directory
      3. TRIAGELOG_LOG_LEVEL environment variable
      4. CLI argument overrides
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"{config_path} must contain a mapping, got {type(file_config).__name__}")
        config.update(file_config)

    env_level = os.environ.get("TRIAGELOG_LOG_LEVEL")
    if env_level:
        config["log_level"] = env_level

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    try:
        config["max_workers"] = int(config["max_workers"])
    except (TypeError, ValueError):
        raise ValueError(f"max_workers must be an integer, got {config['max_workers']!r}")

    config["log_level"] = str(config["log_level"]).upper()
    return config

"""Configuration helpers for the Closet Colors engine."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_VISION_MODEL = "gemini-2.5-flash"
DEFAULT_REASONING_MODEL = "gemini-2.5-flash"
DEFAULT_DATABASE_PATH = "data/closet.db"


@dataclass
class ClosetConfig:
    """Configuration values for the color engine.

    Only the Gemini key is a secret; everything else has a local default so the
    engine can run against a throwaway SQLite file with the vision step
    degrading to the quiz result.
    """

    api_key: Optional[str] = None
    vision_model: str = DEFAULT_VISION_MODEL
    reasoning_model: str = DEFAULT_REASONING_MODEL
    database_path: str = DEFAULT_DATABASE_PATH
    vision_timeout_seconds: float = 15.0
    reasoning_timeout_seconds: float = 30.0
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "ClosetConfig":
        """Build a config from environment variables or an environment YAML file.

        Environment specific YAML lives in ``config/environments/<env>.yaml`` by
        default and is merged with environment variables, which win.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments"))
        yaml_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            yaml_config = cls._load_yaml_config(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            env_key = key.upper()
            return os.getenv(env_key, yaml_config.get(key, default))

        api_key = get_value("google_api_key") or get_value("gemini_api_key")
        vision_model = get_value("vision_model", DEFAULT_VISION_MODEL)
        reasoning_model = get_value("reasoning_model", DEFAULT_REASONING_MODEL)
        database_path = get_value("database_path", DEFAULT_DATABASE_PATH)
        vision_timeout = get_value("vision_timeout_seconds", "15")
        reasoning_timeout = get_value("reasoning_timeout_seconds", "30")

        return cls(
            api_key=api_key,
            vision_model=str(vision_model or DEFAULT_VISION_MODEL),
            reasoning_model=str(reasoning_model or DEFAULT_REASONING_MODEL),
            database_path=str(database_path or DEFAULT_DATABASE_PATH),
            vision_timeout_seconds=float(vision_timeout or 15),
            reasoning_timeout_seconds=float(reasoning_timeout or 30),
            environment=env_name,
        )

    @staticmethod
    def _load_yaml_config(path: Path) -> dict:
        """Parse a flat ``key: value`` YAML file without external dependencies."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            if ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if (value.startswith("\"") and value.endswith("\"")) or (
                value.startswith("'") and value.endswith("'")
            ):
                value = value[1:-1]
            config[key.strip()] = value
        return config

"""Configuration utilities.

Environment driven settings for schedule processing. A `.env` file in the working
directory is honoured, so local runs need no exported variables.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env once on module import
load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(slots=True)
class Settings:
    log_level: str = field(default_factory=lambda: os.getenv("FERRY_LOG_LEVEL", "INFO"))
    schedules_dir: Path = field(default_factory=lambda: Path(os.getenv("FERRY_SCHEDULES_DIR", "schedules")))
    # unparseable annotations abort the whole schedule unless this is off
    strict_annotations: bool = field(default_factory=lambda: _env_flag("FERRY_STRICT_ANNOTATIONS", True))

    def resolve_schedule_path(self, name: str | Path) -> Path:
        path = Path(name)
        if path.is_absolute() or path.exists():
            return path
        return self.schedules_dir / path


settings = Settings()

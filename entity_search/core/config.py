"""Configuration from environment variables (.env)."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Config:
    project_root: Path
    logs_dir: Path
    log_level: str
    log_to_file: bool
    log_preview_chars: int  # Truncation for query text and result snapshots in file events

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        logs_dir = os.getenv("ENTITY_SEARCH_LOGS_DIR")
        return cls(
            project_root=project_root,
            logs_dir=Path(logs_dir) if logs_dir else project_root / "logs",
            log_level=os.getenv("ENTITY_SEARCH_LOG_LEVEL", "INFO").strip().upper(),
            log_to_file=_env_flag("ENTITY_SEARCH_LOG_TO_FILE"),
            log_preview_chars=int(os.getenv("ENTITY_SEARCH_LOG_PREVIEW_CHARS", "500")),
        )

    def validate(self) -> list[str]:
        errors = []
        if not isinstance(logging.getLevelName(self.log_level), int):
            errors.append(f"Unknown log level: {self.log_level}")
        if self.log_preview_chars <= 0:
            errors.append(
                f"ENTITY_SEARCH_LOG_PREVIEW_CHARS must be positive, got {self.log_preview_chars}"
            )
        return errors


config = Config.load()

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_NAME: Final[str] = "pkgcenter"
DEFAULT_AUR_HELPER: Final[str] = "yay"
DEFAULT_LOG_LEVEL: Final[str] = "INFO"

ENV_AUR_HELPER: Final[str] = "PKGCENTER_AUR_HELPER"
ENV_LOG_LEVEL: Final[str] = "PKGCENTER_LOG_LEVEL"
ENV_LOG_DIR: Final[str] = "PKGCENTER_LOG_DIR"


@dataclass(frozen=True, slots=True)
class Settings:
    """Runtime settings read from the environment.

    Attributes:
        aur_helper: AUR helper executable name or path.
        log_level: logly level name.
        log_dir: Directory for the rotating log file.
    """

    aur_helper: str
    log_level: str
    log_dir: Path


def _default_log_dir() -> Path:
    cache_home = os.environ.get("XDG_CACHE_HOME") or str(Path.home() / ".cache")
    return Path(cache_home) / APP_NAME / "logs"


def load_settings() -> Settings:
    """Builds `Settings` from `PKGCENTER_*` environment variables.

    Empty values fall back to the defaults.
    """
    log_dir = os.environ.get(ENV_LOG_DIR, "").strip()
    return Settings(
        aur_helper=os.environ.get(ENV_AUR_HELPER, "").strip() or DEFAULT_AUR_HELPER,
        log_level=(
            os.environ.get(ENV_LOG_LEVEL, "").strip().upper() or DEFAULT_LOG_LEVEL
        ),
        log_dir=Path(log_dir) if log_dir else _default_log_dir(),
    )

"""Runtime settings read from the environment (and a local .env file)."""

import logging
import os
from dataclasses import dataclass, field, replace

from dotenv import load_dotenv

from .utils import warn

APP_TITLE = "Google Cloud SSH Manager"
APP_TAGLINE = "Secure • Fast • Simple"
DEFAULT_FRAME_WIDTH = 80

KEYBOARD_SHORTCUTS = (
    "Keyboard shortcuts:\n"
    "  - Type the number of a VM and press Enter to select it\n"
    "  - Press Enter to accept the default\n"
    "  - Type q or press Ctrl-C to quit at any prompt"
)

TUTORIAL_TEXT = (
    "This tool will guide you through the process of:\n"
    "1. Checking for an existing SSH key\n"
    "2. Creating a new key if needed\n"
    "3. Listing your Google Cloud VMs\n"
    "4. Selecting a VM to connect to\n"
    "5. Adding your SSH key to the VM\n"
    "6. Generating the SSH command for connection"
)


@dataclass(frozen=True)
class AnimationSettings:
    enabled: bool = True
    typing_speed_ms: int = 10
    spinner_duration_ms: int = 1000
    progress_steps: int = 20
    progress_duration_ms: int = 1500


@dataclass(frozen=True)
class HelpSettings:
    tutorial_mode: bool = True
    show_tips: bool = True


@dataclass(frozen=True)
class Settings:
    gcloud_bin: str = "gcloud"
    log_level: str = "WARNING"
    animations: AnimationSettings = field(default_factory=AnimationSettings)
    help: HelpSettings = field(default_factory=HelpSettings)

    def without_animations(self) -> "Settings":
        return replace(self, animations=replace(self.animations, enabled=False))


_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def _env_bool(env: dict, name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    warn(f"Invalid {name} '{raw}', using '{int(default)}'")
    return default


def _env_int(env: dict, name: str, default: int, minimum: int = 0) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        warn(f"Invalid {name} '{raw}', using '{default}'")
        return default
    if value < minimum:
        warn(f"{name} must be at least {minimum}, using '{default}'")
        return default
    return value


def _env_level(env: dict, name: str, default: str) -> str:
    raw = env.get(name)
    if not raw:
        return default
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        warn(f"Invalid {name} '{raw}', using '{default}'")
        return default
    return level


def load_settings(env: dict | None = None) -> Settings:
    """Build settings from environment variables.

    Reads a .env file first when no explicit mapping is given. Invalid values
    are reported and replaced by their defaults.

    :param env: Mapping to read instead of os.environ (tests)
    :return: Resolved settings
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    defaults = AnimationSettings()
    animations = AnimationSettings(
        enabled=_env_bool(env, "GCLOUD_SSH_ANIMATIONS", defaults.enabled),
        typing_speed_ms=_env_int(env, "GCLOUD_SSH_TYPING_SPEED_MS", defaults.typing_speed_ms),
        spinner_duration_ms=_env_int(env, "GCLOUD_SSH_SPINNER_MS", defaults.spinner_duration_ms),
        progress_steps=_env_int(env, "GCLOUD_SSH_PROGRESS_STEPS", defaults.progress_steps, minimum=1),
        progress_duration_ms=_env_int(env, "GCLOUD_SSH_PROGRESS_MS", defaults.progress_duration_ms),
    )
    help_settings = HelpSettings(
        tutorial_mode=_env_bool(env, "GCLOUD_SSH_TUTORIAL", True),
        show_tips=_env_bool(env, "GCLOUD_SSH_TIPS", True),
    )
    return Settings(
        gcloud_bin=env.get("GCLOUD_SSH_GCLOUD") or "gcloud",
        log_level=_env_level(env, "GCLOUD_SSH_LOG_LEVEL", "WARNING"),
        animations=animations,
        help=help_settings,
    )

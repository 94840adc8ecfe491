import logging
import re
import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from .constants import (
    APP_NAME,
    COMMIT_TAG,
    CONFIG_FILE,
    CURA_PROCESS_NAME,
    CURA_VERSION,
    DEFAULT_BRANCH,
    DEFAULT_REMOTE,
)

logger = logging.getLogger(APP_NAME)


def parse_size(value: int | str) -> int:
    """Converts human-readable size strings (e.g., '1MB') to bytes."""
    if isinstance(value, int):
        return value
    match = re.match(r"^(\d+(?:\.\d+)?)\s*([kmg]b?)$", str(value).strip().lower())
    if not match:
        raise ValueError(f"Invalid size format '{value}'")
    num, unit = float(match.group(1)), match.group(2)
    multiplier = {
        "k": 1024,
        "kb": 1024,
        "m": 1024**2,
        "mb": 1024**2,
        "g": 1024**3,
        "gb": 1024**3,
    }
    return int(num * multiplier[unit])


def parse_time(value: int | float | str) -> float:
    """Converts human-readable durations (e.g., '500ms', '1s', '2sec') to seconds."""
    if isinstance(value, (int, float)):
        if value < 0:
            raise ValueError(f"Invalid time format '{value}'")
        return float(value)
    match = re.match(r"^(\d+(?:\.\d+)?)\s*(ms|s|sec)s?$", str(value).strip().lower())
    if not match:
        raise ValueError(f"Invalid time format '{value}'")
    num, unit = float(match.group(1)), match.group(2)
    multiplier = {"ms": 0.001, "s": 1.0, "sec": 1.0}
    return num * multiplier[unit]


@dataclass
class CoreConfig:
    """Git settings for the managed repository.

    Attributes:
        remote_name (str): The remote added by `init`.
        branch (str): The branch created by `init` and pushed upstream.
        commit_tag (str): Prefix for every commit message.
    """

    remote_name: str = DEFAULT_REMOTE
    branch: str = DEFAULT_BRANCH
    commit_tag: str = COMMIT_TAG


@dataclass
class CuraConfig:
    """Settings describing the Cura installation.

    Attributes:
        directory (str | None): Overrides the per-OS configuration directory.
        version (str): The version sub-directory that must be present.
        process_name (str): The process name of the Cura application.
    """

    directory: str | None = None
    version: str = CURA_VERSION
    process_name: str = CURA_PROCESS_NAME


@dataclass
class GuardConfig:
    """Process guard settings.

    Attributes:
        grace_period (float): Seconds to wait after terminating Cura so the OS
            can release its file handles.
    """

    grace_period: float = 1.0


@dataclass
class LimitsConfig:
    """Resource limitation settings.

    Attributes:
        max_log_size (int): Max bytes for the log file before rotation.
    """

    max_log_size: int = 1024 * 1024


@dataclass
class Config:
    """Global configuration aggregator.

    Attributes:
        core (CoreConfig): Git settings.
        cura (CuraConfig): Cura installation settings.
        guard (GuardConfig): Process guard settings.
        limits (LimitsConfig): Resource limits.
    """

    core: CoreConfig = field(default_factory=CoreConfig)
    cura: CuraConfig = field(default_factory=CuraConfig)
    guard: GuardConfig = field(default_factory=GuardConfig)
    limits: LimitsConfig = field(default_factory=LimitsConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> "Config":
        """Loads configuration from disk, applying defaults where necessary.

        Args:
            path (Path | None): The TOML file to read. Defaults to CONFIG_FILE.

        Returns:
            Config: The merged configuration object.
        """
        instance = cls()
        source = path if path is not None else CONFIG_FILE
        if source.exists():
            instance._merge_from_file(source)
        return instance

    def _merge_from_file(self, path: Path) -> None:
        """Parses a TOML file and merges it into the current instance.

        Args:
            path (Path): Path to the TOML file.
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            logger.error(f"Config syntax error in {path}: {e}")
            return
        except OSError as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            return

        unknown_sections = set(data) - {"core", "cura", "guard", "limits"}
        if unknown_sections:
            logger.warning(
                f"Unknown config sections in {path}: "
                f"{', '.join(sorted(unknown_sections))}. Ignoring."
            )

        if "core" in data:
            self.core = self._update_dataclass("core", self.core, data["core"])
        if "cura" in data:
            self.cura = self._update_dataclass("cura", self.cura, data["cura"])
        if "guard" in data:
            self.guard = self._update_dataclass("guard", self.guard, data["guard"])
        if "limits" in data:
            self.limits = self._update_dataclass("limits", self.limits, data["limits"])

    @staticmethod
    def _update_dataclass(section_name: str, instance: Any, updates: dict) -> Any:
        """Updates a dataclass, warning on invalid keys and parsing human-readable formats."""
        valid_keys = instance.__dataclass_fields__.keys()
        filtered_updates = {}

        invalid_keys = set(updates.keys()) - set(valid_keys)
        if invalid_keys:
            logger.warning(
                f"Unknown config keys in [{section_name}]: "
                f"{', '.join(sorted(invalid_keys))}. Ignoring."
            )

        for k, v in updates.items():
            if k not in valid_keys:
                continue

            try:
                if k == "max_log_size":
                    filtered_updates[k] = parse_size(v)
                elif k == "grace_period":
                    filtered_updates[k] = parse_time(v)
                elif k == "directory":
                    # An empty string keeps the per-OS default.
                    filtered_updates[k] = str(v) or None
                else:
                    filtered_updates[k] = str(v)
            except ValueError as e:
                logger.warning(
                    f"Config error in [{section_name}].{k}: {e}. Falling back to default."
                )

        return replace(instance, **filtered_updates)

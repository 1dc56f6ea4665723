"""Profile and schedule sources."""

from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from src.activation.domain.exceptions import ProfileSourceError
from src.activation.domain.models import ActivationDocument, Profile, Schedule
from src.activation.domain.protocols import ProfileSource, ScheduleSource


class StaticProfileSource(ProfileSource, ScheduleSource):
    """Simple source that returns pre-provided profiles and schedules."""

    def __init__(self, profiles: list[Profile] | None = None, schedules: list[Schedule] | None = None):
        """Initialize with profile and schedule lists."""
        self.profiles = list(profiles or [])
        self.schedules = list(schedules or [])

    def update(self, profiles: list[Profile] | None = None, schedules: list[Schedule] | None = None) -> None:
        """Replace profiles and/or schedules."""
        if profiles is not None:
            self.profiles = list(profiles)
        if schedules is not None:
            self.schedules = list(schedules)

    def current_profiles(self) -> list[Profile]:
        return list(self.profiles)

    def current_schedules(self) -> list[Schedule]:
        return list(self.schedules)


class FileProfileSource(ProfileSource, ScheduleSource):
    """
    Reads profiles and schedules from a JSON document.

    The file is re-read whenever its modification time changes. A document
    that fails to load after startup is logged and the last good one is kept.
    """

    def __init__(self, path: str | Path):
        """
        Initialize and load the document.

        Args:
            path: Path to the JSON document

        Raises:
            ProfileSourceError: If the initial document cannot be loaded
        """
        self.path = Path(path)
        self._mtime: float | None = None
        self._document = self._load()

    def current_profiles(self) -> list[Profile]:
        self._reload_if_changed()
        return list(self._document.profiles)

    def current_schedules(self) -> list[Schedule]:
        self._reload_if_changed()
        return list(self._document.schedules)

    def _reload_if_changed(self) -> None:
        try:
            mtime = self.path.stat().st_mtime
        except OSError as e:
            logger.warning(f"Cannot stat profile document {self.path}: {e}")
            return

        if mtime == self._mtime:
            return

        try:
            self._document = self._load()
        except ProfileSourceError as e:
            logger.error(f"{e.message}; keeping previous document")
            self._mtime = mtime

    def _load(self) -> ActivationDocument:
        try:
            mtime = self.path.stat().st_mtime
            document = ActivationDocument.model_validate_json(self.path.read_bytes())
        except OSError as e:
            raise ProfileSourceError(str(self.path), str(e)) from e
        except ValidationError as e:
            raise ProfileSourceError(str(self.path), f"{e.error_count()} validation error(s)") from e

        self._mtime = mtime
        logger.info(
            f"Loaded {len(document.profiles)} profiles and {len(document.schedules)} schedules "
            f"from {self.path}"
        )
        return document

"""Activation history: where delivered profile activations are recorded."""

from collections import deque
from pathlib import Path

import pandas as pd
from loguru import logger

from src.activation.domain.models import ActivationEvent
from src.activation.domain.protocols import ActivationLog

COLUMNS = ["timestamp", "profile_id", "source", "schedule_id"]


def _events_to_frame(events) -> pd.DataFrame:
    return pd.DataFrame([event.to_dict() for event in events], columns=COLUMNS)


class InMemoryActivationLog(ActivationLog):
    """Keeps the most recent activations; older ones fall off the end."""

    def __init__(self, max_events: int = 1000):
        self.events: deque[ActivationEvent] = deque(maxlen=max_events)

    def record(self, event: ActivationEvent) -> None:
        self.events.append(event)

    def flush(self) -> None:
        pass

    def last(self) -> ActivationEvent | None:
        return self.events[-1] if self.events else None

    def to_dataframe(self) -> pd.DataFrame:
        return _events_to_frame(self.events)

    def clear(self) -> None:
        self.events.clear()

    def __len__(self):
        return len(self.events)


class CSVActivationLog(ActivationLog):
    """
    Appends activations to a CSV file.

    Events are buffered and written in batches of ``buffer_size``; the
    dispatcher flushes the remainder when it stops. The header is written
    only when the file is new, empty or opened with mode ``"w"``.
    """

    def __init__(self, filepath: str, mode: str = "a", buffer_size: int = 20):
        self.path = Path(filepath)
        self._pending: list[ActivationEvent] = []
        self._buffer_size = buffer_size

        if mode == "w" and self.path.exists():
            self.path.unlink()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def record(self, event: ActivationEvent) -> None:
        self._pending.append(event)
        if len(self._pending) >= self._buffer_size:
            self.flush()

    def flush(self) -> None:
        """Write pending events. Raises OSError if the file cannot be written; events stay pending."""
        if not self._pending:
            return

        new_file = not self.path.is_file() or self.path.stat().st_size == 0
        if new_file:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        _events_to_frame(self._pending).to_csv(self.path, mode="a", header=new_file, index=False)

        logger.debug(f"Wrote {len(self._pending)} activation(s) to {self.path}")
        self._pending.clear()

    def to_dataframe(self) -> pd.DataFrame:
        """All recorded activations, on disk and pending, oldest first."""
        self.flush()
        if not self.path.is_file() or self.path.stat().st_size == 0:
            return pd.DataFrame(columns=COLUMNS)
        return pd.read_csv(self.path, parse_dates=["timestamp"])


def create_activation_log(csv_path: str | None = None, buffer_size: int = 20, max_events: int = 1000) -> ActivationLog:
    """Build the CSV log when a path is configured, otherwise the in-memory one."""
    if csv_path:
        logger.info(f"Recording activations to {csv_path}")
        return CSVActivationLog(csv_path, mode="a", buffer_size=buffer_size)
    return InMemoryActivationLog(max_events=max_events)

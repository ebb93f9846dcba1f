"""Shared enumerations used across the backup registry."""

from __future__ import annotations

from enum import StrEnum


class HotExitMode(StrEnum):
    """Configured hot-exit policy (``LIFEBOAT_HOT_EXIT``)."""

    OFF = "off"
    ON_EXIT = "onExit"
    ON_EXIT_AND_WINDOW_CLOSE = "onExitAndWindowClose"

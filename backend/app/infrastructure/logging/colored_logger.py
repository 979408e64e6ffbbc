"""Colored lifecycle logger — ANSI-colored console logging for background mutations.

Provides a LifecycleLogger with color-coded output per lifecycle stage,
making it easy to follow a create/update/remove through its asset store
and database calls in the terminal.

Color scheme:
    🔵 Blue    — Validation
    🟢 Green   — Upload
    🟡 Yellow  — Asset release (deletion)
    🟣 Magenta — Persistence
    🔴 Red     — Errors
    ⚪ Gray    — Details
"""

import logging
import time
from contextlib import contextmanager
from typing import Any


# ── ANSI Color Codes ─────────────────────────────────────────────────

class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    WHITE = "\033[97m"
    GRAY = "\033[90m"


# ── Lifecycle Stage Definitions ──────────────────────────────────────

class LifecycleStage:
    """Predefined lifecycle stages with colors and icons."""

    VALIDATE = ("VALIDATE", _Colors.BLUE, "🔎")
    UPLOAD = ("UPLOAD", _Colors.GREEN, "☁️")
    RELEASE = ("RELEASE", _Colors.YELLOW, "🗑️")
    PERSIST = ("PERSIST", _Colors.MAGENTA, "💾")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


def _format_details(kwargs: dict[str, Any], color: str = _Colors.GRAY) -> str:
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {color}({details}){_Colors.RESET}"


# ── LifecycleLogger ──────────────────────────────────────────────────

class LifecycleLogger:
    """Color-coded logger for background create/update/remove flows.

    Usage:
        log = LifecycleLogger("BackgroundService")
        log.step_start(LifecycleStage.UPLOAD, "Uploading primary asset")
        log.detail("size=2.4 MB")
        log.step_complete(LifecycleStage.UPLOAD, "Stored", handle="video/backgrounds/abc")
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)
        self._component = component_name

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the start of a lifecycle step with its stage color."""
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log the successful completion of a lifecycle step."""
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.info(formatted)

    def step_warning(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        """Log a non-fatal problem, e.g. an asset that could not be deleted."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.YELLOW}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.YELLOW}⚠ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.warning(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        """Log a lifecycle step error in red."""
        label = stage[0]
        _, color, icon = LifecycleStage.ERROR
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def detail(self, message: str, **kwargs: Any) -> None:
        """Log additional detail (gray/dimmed)."""
        formatted = f"   {_Colors.GRAY}├─ {message}{_Colors.RESET}"
        if kwargs:
            formatted += _format_details(kwargs, _Colors.DIM)
        self._logger.info(formatted)

    def separator(self, title: str = "") -> None:
        """Log a visual separator line."""
        if title:
            self._logger.info(
                f"{_Colors.GRAY}{'─' * 10} {title} {'─' * max(0, 50 - len(title))}{_Colors.RESET}"
            )
        else:
            self._logger.info(f"{_Colors.GRAY}{'─' * 60}{_Colors.RESET}")

    @contextmanager
    def timed_step(self, stage: tuple[str, str, str], message: str, **kwargs: Any):
        """Context manager that logs start/end with elapsed time.

        Usage:
            with log.timed_step(LifecycleStage.UPLOAD, "Uploading thumbnail"):
                stored = await asset_store.upload(thumbnail)
        """
        self.step_start(stage, message, **kwargs)
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            elapsed = time.perf_counter() - start
            self.step_error(stage, f"{message} — failed after {elapsed:.2f}s", error=e)
            raise
        else:
            elapsed = time.perf_counter() - start
            self.step_complete(stage, f"{message} — {elapsed:.2f}s", **kwargs)

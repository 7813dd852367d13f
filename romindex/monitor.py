"""Runtime logging and monitoring helpers for romindex."""

from __future__ import annotations

import faulthandler
import logging
import sys
import threading
import time
import traceback
from datetime import date
from pathlib import Path
from typing import Callable, Optional

from .shared_config import ensure_app_directories

LOGGER_NAME = "romindex"

_INITIALIZED = False
_FAULT_HANDLER_FILE = None
_PREVIOUS_HOOKS = None

_FORMAT = "%(asctime)s | %(levelname)s | %(threadName)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _default_log_path(log_dir: Optional[str] = None) -> Path:
    from .shared_config import LOGS_DIR

    return Path(log_dir or LOGS_DIR) / f"runtime-{date.today().isoformat()}.log"


def setup_runtime_monitor(
    app_name: str = LOGGER_NAME,
    *,
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    echo: bool = False,
    level: int = logging.INFO,
) -> logging.Logger:
    """Initialize process-wide logging once; later calls return the same logger."""
    global _INITIALIZED, _FAULT_HANDLER_FILE
    logger = logging.getLogger(app_name)

    if _INITIALIZED:
        return logger

    logger.setLevel(level)
    logger.propagate = False

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT)

    log_path = Path(log_file) if log_file else _default_log_path(log_dir)
    ensure_app_directories(str(log_path.parent))
    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    if echo:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    # low-level crash dumps (segfaults, deadlocks) to a dedicated file
    crash_log = log_path.with_name("crash.log")
    _FAULT_HANDLER_FILE = crash_log.open("a", encoding="utf-8")
    faulthandler.enable(file=_FAULT_HANDLER_FILE)

    logger.info("Runtime monitor initialized")
    logger.info("Log file: %s", log_path)

    _install_exception_hooks(logger)

    _INITIALIZED = True
    return logger


def shutdown_runtime_monitor(app_name: str = LOGGER_NAME) -> None:
    """Detach handlers and hooks so the monitor can be set up again."""
    global _INITIALIZED, _FAULT_HANDLER_FILE, _PREVIOUS_HOOKS
    logger = logging.getLogger(app_name)
    for handler in list(logger.handlers):
        handler.flush()
        handler.close()
        logger.removeHandler(handler)

    if _FAULT_HANDLER_FILE is not None:
        faulthandler.disable()
        _FAULT_HANDLER_FILE.close()
        _FAULT_HANDLER_FILE = None

    if _PREVIOUS_HOOKS is not None:
        sys.excepthook, threading.excepthook = _PREVIOUS_HOOKS
        _PREVIOUS_HOOKS = None

    _INITIALIZED = False


def _install_exception_hooks(logger: logging.Logger) -> None:
    global _PREVIOUS_HOOKS

    def _print_to_terminal(exc_type, exc_value, exc_tb, *, prefix: str | None = None) -> None:
        stream = getattr(sys, "__stderr__", None) or sys.stderr
        if stream is None:
            return
        if prefix:
            print(prefix, file=stream)
        traceback.print_exception(exc_type, exc_value, exc_tb, file=stream)
        stream.flush()

    def _sys_hook(exc_type, exc_value, exc_tb):
        if exc_type and issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return
        logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))
        _print_to_terminal(exc_type, exc_value, exc_tb, prefix="[romindex] Unhandled exception")

    def _thread_hook(args: threading.ExceptHookArgs):
        thread_name = args.thread.name if args.thread else "<unknown>"
        logger.critical(
            "Unhandled thread exception in %s",
            thread_name,
            exc_info=(args.exc_type, args.exc_value, args.exc_traceback),
        )
        _print_to_terminal(
            args.exc_type,
            args.exc_value,
            args.exc_traceback,
            prefix=f"[romindex] Unhandled thread exception ({thread_name})",
        )

    _PREVIOUS_HOOKS = (sys.excepthook, threading.excepthook)
    sys.excepthook = _sys_hook
    threading.excepthook = _thread_hook


def monitor_action(action: str, *, logger: Optional[logging.Logger] = None) -> None:
    """Emit a real-time action event."""
    (logger or logging.getLogger(LOGGER_NAME)).info("action: %s", action)


def log_event(event: str, message: str, level: int = logging.INFO) -> None:
    """Emit a structured ``event | message`` line."""
    logging.getLogger(LOGGER_NAME).log(level, "%s | %s", event, message)


def start_monitored_thread(
    target: Callable[[], None],
    *,
    name: str,
    logger: Optional[logging.Logger] = None,
    daemon: bool = True,
) -> threading.Thread:
    """Start a thread that logs start/end and never fails silently."""
    log = logger or logging.getLogger(LOGGER_NAME)

    def _wrapped():
        log.info("thread start: %s", name)
        started = time.time()
        try:
            target()
            log.info("thread end: %s (%.2fs)", name, time.time() - started)
        except Exception:
            log.exception("thread crash: %s", name)
            raise

    th = threading.Thread(target=_wrapped, name=name, daemon=daemon)
    th.start()
    return th

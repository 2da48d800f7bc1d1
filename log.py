"""Logging for Sequence Tracker.

Every module logs through a child of the ``sequencetracker`` logger, which
owns the handlers: a rotating file next to the user's data and the console.
The console level comes from ``SEQUENCETRACKER_LOG_LEVEL`` (default INFO);
the file always records DEBUG.
"""

from __future__ import annotations

import logging
import os
import sys
import tempfile
from logging.handlers import RotatingFileHandler

from platform_utils import default_data_folder

ROOT_LOGGER = "sequencetracker"
LOG_FILENAME = "sequencetracker.log"
LOG_DIR_ENV = "SEQUENCETRACKER_LOG_DIR"
LOG_LEVEL_ENV = "SEQUENCETRACKER_LOG_LEVEL"


def _log_dir_candidates() -> list[str]:
  candidates = []
  override = os.environ.get(LOG_DIR_ENV, "")
  if override:
    candidates.append(os.path.expanduser(override))
  # Beside the saved sequences
  candidates.append(os.path.join(os.path.expanduser(default_data_folder()), "logs"))
  if sys.platform == "win32":
    appdata = os.environ.get("APPDATA", "")
    if appdata:
      candidates.append(os.path.join(appdata, "SequenceTracker"))
  else:
    state = os.environ.get("XDG_STATE_HOME", os.path.expanduser("~/.local/state"))
    candidates.append(os.path.join(state, "sequencetracker"))
  return candidates


def _first_writable(candidates: list[str]) -> str:
  """Return the first candidate that exists or can be created and written."""
  for path in candidates:
    try:
      os.makedirs(path, exist_ok=True)
    except OSError:
      continue
    if os.access(path, os.W_OK):
      return path
  return tempfile.gettempdir()


def _resolve_log_dir() -> str:
  return _first_writable(_log_dir_candidates())


def _console_level(value: str | None = None) -> int:
  """Parse a level name like "debug" or "WARNING"; unknown names give INFO."""
  if value is None:
    value = os.environ.get(LOG_LEVEL_ENV, "")
  level = logging.getLevelName(value.strip().upper()) if value else logging.INFO
  return level if isinstance(level, int) else logging.INFO


LOG_PATH = os.path.join(_resolve_log_dir(), LOG_FILENAME)


def _configure_root() -> logging.Logger:
  root = logging.getLogger(ROOT_LOGGER)
  if root.handlers:
    return root
  root.setLevel(logging.DEBUG)
  root.propagate = False

  formatter = logging.Formatter(
    "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
  )
  # 1 MB, 3 backups
  try:
    file_handler = RotatingFileHandler(
      LOG_PATH, maxBytes=1_000_000, backupCount=3, encoding="utf-8",
    )
  except OSError:
    file_handler = None
  if file_handler:
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

  console = logging.StreamHandler()
  console.setLevel(_console_level())
  console.setFormatter(formatter)
  root.addHandler(console)
  return root


def get_logger(name: str) -> logging.Logger:
  """Logger for one part of the app, e.g. ``get_logger("store")``."""
  _configure_root()
  return logging.getLogger(f"{ROOT_LOGGER}.{name}")

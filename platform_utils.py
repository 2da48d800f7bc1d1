"""Platform-specific locations for stored data."""

import os
import platform

SYSTEM = platform.system()

APP_FOLDER_NAME = "Sequence Tracker"


def default_data_folder():
  """Return a sensible default folder for saved sequences per platform."""
  if SYSTEM in ("Windows", "Darwin"):
    return "~/Documents/" + APP_FOLDER_NAME
  # XDG data dir, falling back to ~/.local/share
  xdg = os.environ.get("XDG_DATA_HOME", "")
  if xdg:
    return os.path.join(xdg, "sequencetracker")
  return "~/.local/share/sequencetracker"

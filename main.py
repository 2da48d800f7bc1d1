from __future__ import annotations

import json
import os
import sys
from typing import Any

from PySide6.QtGui import QColor
from PySide6.QtWidgets import QApplication, QMainWindow, QStackedWidget

from field_view import DrawingScreen
from file_list import FileListScreen
from line_store import LineStore
from log import get_logger
from platform_utils import default_data_folder
from session import DrawingSession

log = get_logger("main")

# When frozen as exe, config lives next to the executable
if getattr(sys, "frozen", False):
  APP_DIR = os.path.dirname(sys.executable)
else:
  APP_DIR = os.path.dirname(os.path.abspath(__file__))
CONFIG_PATH = os.path.join(APP_DIR, "config.json")


CONFIG_VERSION = 1

DEFAULT_CONFIG = {
  "config_version": CONFIG_VERSION,
  "data_folder": default_data_folder(),
  "field_image": "",
  "line_color": "#ff0000",
  "line_width": 4,
  "last_file": "",
}

WINDOW_TITLE = "Sequence Tracker"


def migrate_config(config: dict[str, Any]) -> bool:
  """Fill in missing keys from defaults and bump version. Returns True if changed."""
  version = config.get("config_version", 1)
  changed = False

  for key, default_val in DEFAULT_CONFIG.items():
    if key not in config:
      config[key] = default_val
      log.info("Config migration: added '%s' = %r", key, default_val)
      changed = True

  if version < CONFIG_VERSION:
    config["config_version"] = CONFIG_VERSION
    changed = True
    log.info("Config migrated from v%d to v%d", version, CONFIG_VERSION)

  return changed


def load_config() -> dict[str, Any]:
  if not os.path.exists(CONFIG_PATH):
    log.info("No config found, creating defaults at %s", CONFIG_PATH)
    save_config(DEFAULT_CONFIG)
    return dict(DEFAULT_CONFIG)
  try:
    with open(CONFIG_PATH) as f:
      config = json.load(f)
  except json.JSONDecodeError as e:
    log.error("Corrupted config file, resetting to defaults: %s", e)
    save_config(DEFAULT_CONFIG)
    return dict(DEFAULT_CONFIG)
  except OSError as e:
    log.error("Cannot read config file: %s", e)
    return dict(DEFAULT_CONFIG)

  if not isinstance(config, dict):
    log.error("Config file is not an object, resetting to defaults")
    save_config(DEFAULT_CONFIG)
    return dict(DEFAULT_CONFIG)

  if migrate_config(config):
    save_config(config)
  return config


def save_config(config: dict[str, Any]) -> None:
  try:
    with open(CONFIG_PATH, "w") as f:
      json.dump(config, f, indent=2)
      f.write("\n")
  except OSError as e:
    log.error("Failed to save config: %s", e)


class SequenceTracker:
  def __init__(self) -> None:
    self.config: dict[str, Any] = load_config()
    self.store = LineStore(self.config.get("data_folder") or default_data_folder())
    self.session = DrawingSession(self.store)
    self.window: QMainWindow | None = None
    self._stack: QStackedWidget | None = None
    self._file_screen: FileListScreen | None = None
    self._drawing_screen: DrawingScreen | None = None

  def _line_color(self) -> QColor:
    color = QColor(self.config.get("line_color", "#ff0000"))
    if not color.isValid():
      log.warning("Invalid line color %r, using red", self.config.get("line_color"))
      return QColor(255, 0, 0)
    return color

  def _line_width(self) -> int:
    value = self.config.get("line_width", 4)
    try:
      width = int(value)
    except (TypeError, ValueError):
      width = 0
    if isinstance(value, bool) or width <= 0:
      log.warning("Invalid line width %r, using 4", value)
      return 4
    return width

  def build_window(self) -> QMainWindow:
    self.window = QMainWindow()
    self.window.setWindowTitle(WINDOW_TITLE)
    self.window.resize(1024, 700)

    self._stack = QStackedWidget()
    self._file_screen = FileListScreen(self.session, on_open=self.show_drawing)
    self._drawing_screen = DrawingScreen(
      self.session,
      field_image=self.config.get("field_image", ""),
      line_color=self._line_color(),
      line_width=self._line_width(),
      on_back=self.show_file_list,
    )
    self._stack.addWidget(self._file_screen)
    self._stack.addWidget(self._drawing_screen)
    self.window.setCentralWidget(self._stack)

    last = self.config.get("last_file", "")
    if last and last in self.store.list_files():
      self.session.on_select_file(last)
      self.show_drawing(last)
    else:
      self.show_file_list()
    return self.window

  def show_drawing(self, name: str) -> None:
    self.config["last_file"] = name
    save_config(self.config)
    self._drawing_screen.refresh()
    self._stack.setCurrentWidget(self._drawing_screen)

  def show_file_list(self) -> None:
    self._file_screen.refresh()
    self._stack.setCurrentWidget(self._file_screen)

  def run(self) -> None:
    self.app = QApplication.instance() or QApplication(sys.argv)
    self.app.aboutToQuit.connect(self._shutdown)
    self.build_window().show()
    log.info("Sequence Tracker running (data folder=%s)", self.store.folder)
    exit_code = self.app.exec()
    sys.exit(exit_code)

  def _shutdown(self) -> None:
    # Commit a drag that was still in progress
    if self.session.is_drawing:
      self.session.on_gesture_end()
    log.info("Sequence Tracker exiting")


def main() -> None:
  SequenceTracker().run()


if __name__ == "__main__":
  main()

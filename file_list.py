"""File list screen: pick, create, rename and delete sequence files."""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
  QWidget, QHBoxLayout, QVBoxLayout, QPushButton, QListWidget,
  QListWidgetItem, QInputDialog, QMessageBox, QLabel,
)

from log import get_logger
from session import DrawingSession

log = get_logger("files")


class FileListScreen(QWidget):
  """Lists registered files and opens the chosen one for drawing."""

  def __init__(self, session: DrawingSession,
               on_open: Callable[[str], None] | None = None,
               parent: QWidget | None = None):
    super().__init__(parent)
    self._session = session
    self._on_open = on_open

    layout = QVBoxLayout(self)

    title = QLabel("Sequences")
    title.setStyleSheet("QLabel { font-size: 18px; font-weight: bold; }")
    layout.addWidget(title)

    self.list_widget = QListWidget()
    self.list_widget.itemActivated.connect(self._open_item)
    self.list_widget.currentItemChanged.connect(self._update_buttons)
    layout.addWidget(self.list_widget, 1)

    buttons = QHBoxLayout()
    self._new_btn = QPushButton("New")
    self._new_btn.clicked.connect(self._create)
    buttons.addWidget(self._new_btn)
    self._rename_btn = QPushButton("Rename")
    self._rename_btn.clicked.connect(self._rename)
    buttons.addWidget(self._rename_btn)
    self._delete_btn = QPushButton("Delete")
    self._delete_btn.clicked.connect(self._delete)
    buttons.addWidget(self._delete_btn)
    buttons.addStretch()
    self._open_btn = QPushButton("Open")
    self._open_btn.clicked.connect(self._open_selected)
    buttons.addWidget(self._open_btn)
    layout.addLayout(buttons)

    self.refresh()

  def refresh(self) -> None:
    current = self.selected_name()
    self.list_widget.clear()
    for name in self._session.store.list_files():
      item = QListWidgetItem(name)
      item.setData(Qt.ItemDataRole.UserRole, name)
      self.list_widget.addItem(item)
      if name == current:
        self.list_widget.setCurrentItem(item)
    self._update_buttons()

  def selected_name(self) -> str | None:
    item = self.list_widget.currentItem()
    return item.data(Qt.ItemDataRole.UserRole) if item else None

  def _update_buttons(self, *_args) -> None:
    has_sel = self.list_widget.currentItem() is not None
    self._rename_btn.setEnabled(has_sel)
    self._delete_btn.setEnabled(has_sel)
    self._open_btn.setEnabled(has_sel)

  # -- Actions ----------------------------------------------------------------

  def create_file(self, name: str) -> bool:
    ok = self._session.on_create_file(name)
    self.refresh()
    return ok

  def rename_file(self, old: str, new: str) -> bool:
    ok = self._session.on_rename_file(old, new)
    self.refresh()
    return ok

  def _create(self) -> None:
    name, accepted = QInputDialog.getText(self, "New File", "Name:")
    if not accepted:
      return
    if not self.create_file(name):
      log.warning("Could not create file %r", name)
      QMessageBox.warning(self, "New File", "That name is empty or already in use.")

  def _rename(self) -> None:
    old = self.selected_name()
    if old is None:
      return
    new, accepted = QInputDialog.getText(self, "Rename File", "New name:", text=old)
    if not accepted:
      return
    if not self.rename_file(old, new):
      log.warning("Could not rename %r to %r", old, new)
      QMessageBox.warning(self, "Rename File", "Could not rename '%s'." % old)

  def _delete(self) -> None:
    name = self.selected_name()
    if name is None:
      return
    answer = QMessageBox.question(self, "Delete File", "Delete '%s' and its lines?" % name)
    if answer == QMessageBox.StandardButton.Yes:
      self._session.on_delete_file(name)
      self.refresh()

  def _open_item(self, item: QListWidgetItem) -> None:
    self._open(item.data(Qt.ItemDataRole.UserRole))

  def _open_selected(self) -> None:
    name = self.selected_name()
    if name is not None:
      self._open(name)

  def _open(self, name: str) -> None:
    self._session.on_select_file(name)
    if self._on_open:
      self._on_open(name)

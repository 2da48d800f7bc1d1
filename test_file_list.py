"""Tests for the file list screen."""

from unittest.mock import patch, MagicMock

import pytest
from PySide6.QtCore import QPointF
from PySide6.QtWidgets import QApplication, QMessageBox

app = QApplication.instance() or QApplication([])

from file_list import FileListScreen
from line_store import LineStore
from session import DrawingSession


@pytest.fixture
def session(tmp_path):
  store = LineStore(str(tmp_path / "data"))
  store.register_file("opener")
  store.register_file("counter")
  return DrawingSession(store)


@pytest.fixture
def screen(session):
  s = FileListScreen(session, on_open=MagicMock())
  yield s
  s.close()


def names(screen):
  return [screen.list_widget.item(i).text() for i in range(screen.list_widget.count())]


class TestFileList:
  def test_lists_registry_in_order(self, screen):
    assert names(screen) == ["opener", "counter"]

  def test_buttons_disabled_without_selection(self, screen):
    assert not screen._open_btn.isEnabled()
    assert not screen._rename_btn.isEnabled()

  def test_create_file(self, screen):
    assert screen.create_file("sweep")
    assert names(screen) == ["opener", "counter", "sweep"]

  def test_create_duplicate(self, screen):
    assert screen.create_file("opener") is False
    assert names(screen) == ["opener", "counter"]

  def test_rename_file(self, screen):
    assert screen.rename_file("counter", "counter v2")
    assert names(screen) == ["opener", "counter v2"]

  def test_open_selected(self, screen, session):
    session.store.append("counter", [QPointF(0, 0), QPointF(1, 1)])
    screen.list_widget.setCurrentRow(1)
    assert screen._open_btn.isEnabled()
    screen._open_btn.click()
    assert session.file_name == "counter"
    assert len(session.lines) == 1
    screen._on_open.assert_called_once_with("counter")

  def test_new_button_prompts(self, screen):
    with patch("file_list.QInputDialog.getText", return_value=("sweep", True)):
      screen._new_btn.click()
    assert "sweep" in names(screen)

  def test_new_button_cancelled(self, screen):
    with patch("file_list.QInputDialog.getText", return_value=("sweep", False)):
      screen._new_btn.click()
    assert "sweep" not in names(screen)

  def test_new_button_warns_on_duplicate(self, screen):
    with patch("file_list.QInputDialog.getText", return_value=("opener", True)), \
         patch("file_list.QMessageBox.warning") as warn:
      screen._new_btn.click()
    warn.assert_called_once()

  def test_delete_confirmed(self, screen, session):
    screen.list_widget.setCurrentRow(0)
    with patch("file_list.QMessageBox.question",
               return_value=QMessageBox.StandardButton.Yes):
      screen._delete_btn.click()
    assert names(screen) == ["counter"]
    assert session.store.list_files() == ["counter"]

  def test_delete_declined(self, screen):
    screen.list_widget.setCurrentRow(0)
    with patch("file_list.QMessageBox.question",
               return_value=QMessageBox.StandardButton.No):
      screen._delete_btn.click()
    assert names(screen) == ["opener", "counter"]

  def test_refresh_keeps_selection(self, screen):
    screen.list_widget.setCurrentRow(1)
    screen.refresh()
    assert screen.selected_name() == "counter"

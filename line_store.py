"""JSON persistence for drawn sequences and the registry of file names."""

from __future__ import annotations

import json
import math
import os
import tempfile
from typing import Any, Sequence
from urllib.parse import quote

from PySide6.QtCore import QPointF

from log import get_logger

log = get_logger("store")

REGISTRY_FILENAME = "files.json"
COLLECTION_SUFFIX = ".lines.json"


class StoreError(Exception):
  """Base exception for line store reads and writes."""


class StorageMissingError(StoreError):
  """Raised when no stored data exists for a name."""


class StorageCorruptError(StoreError):
  """Raised when stored data exists but cannot be decoded."""


def encode_collection(collection: Sequence[Sequence[QPointF]]) -> list:
  return [
    [{"x": float(p.x()), "y": float(p.y())} for p in sequence]
    for sequence in collection
  ]


def decode_collection(data: Any) -> list[list[QPointF]]:
  """Turn decoded JSON into a LineCollection, validating its shape."""
  if not isinstance(data, list):
    raise StorageCorruptError("expected a list of sequences, got %s" % type(data).__name__)
  collection = []
  for sequence in data:
    if not isinstance(sequence, list):
      raise StorageCorruptError("sequence is not a list: %r" % (sequence,))
    points = []
    for item in sequence:
      if not isinstance(item, dict):
        raise StorageCorruptError("point is not an object: %r" % (item,))
      x, y = item.get("x"), item.get("y")
      for v in (x, y):
        if isinstance(v, bool) or not isinstance(v, (int, float)) or not math.isfinite(v):
          raise StorageCorruptError("bad coordinate in point %r" % (item,))
      points.append(QPointF(float(x), float(y)))
    collection.append(points)
  return collection


def _name_key(name: str) -> str:
  """Storage identity of a file name; case-insensitive like NTFS and APFS."""
  return name.casefold()


class LineStore:
  """File-backed store: one JSON file per named collection plus a registry."""

  def __init__(self, folder: str) -> None:
    self._folder = os.path.expanduser(folder)

  @property
  def folder(self) -> str:
    return self._folder

  def _collection_path(self, name: str) -> str:
    # Quote so any display name maps to a single safe file name
    return os.path.join(self._folder, quote(_name_key(name), safe="") + COLLECTION_SUFFIX)

  def _registry_path(self) -> str:
    return os.path.join(self._folder, REGISTRY_FILENAME)

  # -- Fallible primitives ----------------------------------------------------

  def _read_json(self, path: str) -> Any:
    if not os.path.exists(path):
      raise StorageMissingError(f"No stored data at {path}")
    try:
      with open(path, encoding="utf-8") as f:
        return json.load(f)
    except json.JSONDecodeError as e:
      raise StorageCorruptError(f"Invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
      raise StorageCorruptError(f"Cannot read {path}: {e}") from e

  def _write_json(self, path: str, payload: Any) -> None:
    """Write payload via a temp file and rename so readers never see a partial file."""
    tmp_path = None
    try:
      os.makedirs(self._folder, exist_ok=True)
      with tempfile.NamedTemporaryFile(
        "w", dir=self._folder, suffix=".tmp", delete=False, encoding="utf-8",
      ) as f:
        tmp_path = f.name
        json.dump(payload, f, indent=2, allow_nan=False)
        f.write("\n")
      os.replace(tmp_path, path)
    except (OSError, TypeError, ValueError) as e:
      if tmp_path and os.path.exists(tmp_path):
        try:
          os.remove(tmp_path)
        except OSError:
          pass
      raise StoreError(f"Failed to write {path}: {e}") from e

  def read_collection(self, name: str) -> list[list[QPointF]]:
    """Read a collection, raising StorageMissingError or StorageCorruptError."""
    return decode_collection(self._read_json(self._collection_path(name)))

  def write_collection(self, name: str, collection: Sequence[Sequence[QPointF]]) -> None:
    self._write_json(self._collection_path(name), encode_collection(collection))

  def read_registry(self) -> list[str]:
    data = self._read_json(self._registry_path())
    if not isinstance(data, list) or not all(isinstance(n, str) for n in data):
      raise StorageCorruptError("registry is not a list of names")
    # Drop duplicates, keep first occurrence
    return list(dict.fromkeys(data))

  def write_registry(self, names: Sequence[str]) -> None:
    self._write_json(self._registry_path(), list(names))

  # -- Best-effort API --------------------------------------------------------

  def load(self, name: str) -> list[list[QPointF]]:
    """Load a collection; missing or corrupt storage yields an empty one."""
    try:
      return self.read_collection(name)
    except StorageMissingError:
      return []
    except StorageCorruptError as e:
      log.warning("Corrupted line file for '%s', treating as empty: %s", name, e)
      return []

  def save(self, name: str, collection: Sequence[Sequence[QPointF]]) -> bool:
    try:
      self.write_collection(name, collection)
    except StoreError as e:
      log.error("Failed to save lines for '%s': %s", name, e)
      return False
    return True

  def append(self, name: str, sequence: Sequence[QPointF]) -> list[list[QPointF]]:
    """Append one sequence to the stored collection and write it back.

    Single-point sequences are recorded; empty ones are ignored.
    """
    collection = self.load(name)
    if not sequence:
      return collection
    collection.append([QPointF(p) for p in sequence])
    if self.save(name, collection):
      log.debug("Saved line %d (%d points) to '%s'", len(collection), len(sequence), name)
    return collection

  def clear(self, name: str) -> None:
    """Delete the stored collection; the name stays registered."""
    path = self._collection_path(name)
    try:
      os.remove(path)
    except FileNotFoundError:
      pass
    except OSError as e:
      log.error("Failed to clear lines for '%s': %s", name, e)
      return
    log.info("Cleared lines for '%s'", name)

  def list_files(self) -> list[str]:
    try:
      return self.read_registry()
    except StorageMissingError:
      return []
    except StorageCorruptError as e:
      log.warning("Corrupted file registry, treating as empty: %s", e)
      return []

  def register_file(self, name: str) -> bool:
    """Add a new, empty file. Returns False for blank or duplicate names.

    Names differing only in case count as duplicates.
    """
    name = name.strip()
    if not name:
      return False
    names = self.list_files()
    if _name_key(name) in {_name_key(n) for n in names}:
      log.debug("File '%s' already registered", name)
      return False
    try:
      if not os.path.exists(self._collection_path(name)):
        self.write_collection(name, [])
      self.write_registry(names + [name])
    except StoreError as e:
      log.error("Failed to register file '%s': %s", name, e)
      return False
    log.info("Registered file '%s'", name)
    return True

  def rename_file(self, old: str, new: str) -> bool:
    """Move a file's lines and registry entry to a new name.

    Does nothing and returns False if ``old`` is unknown, ``new`` is
    blank or taken, or the move fails part way.
    """
    new = new.strip()
    names = self.list_files()
    old_path = self._collection_path(old)
    new_path = self._collection_path(new)
    if not new or (old not in names and not os.path.exists(old_path)):
      return False
    if new == old:
      return True
    # A case-only rename keeps the same storage file
    same_storage = old_path == new_path
    others = {_name_key(n) for n in names if n != old}
    if _name_key(new) in others or (not same_storage and os.path.exists(new_path)):
      log.warning("Cannot rename '%s' to '%s': name already in use", old, new)
      return False

    if old in names:
      renamed = [new if n == old else n for n in names]
    else:
      renamed = names + [new]
    moved = False
    try:
      if not same_storage and os.path.exists(old_path):
        os.replace(old_path, new_path)
        moved = True
      self.write_registry(renamed)
    except (OSError, StoreError) as e:
      log.error("Failed to rename '%s' to '%s': %s", old, new, e)
      if moved:
        try:
          os.replace(new_path, old_path)
        except OSError as undo_err:
          log.error("Could not restore lines for '%s': %s", old, undo_err)
      return False
    log.info("Renamed file '%s' to '%s'", old, new)
    return True

  def delete_file(self, name: str) -> bool:
    names = self.list_files()
    if name not in names:
      return False
    try:
      self.write_registry([n for n in names if n != name])
    except StoreError as e:
      log.error("Failed to delete file '%s': %s", name, e)
      return False
    self.clear(name)
    log.info("Deleted file '%s'", name)
    return True

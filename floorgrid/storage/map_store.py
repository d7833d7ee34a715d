import json
import os
import tempfile
import uuid

from floorgrid.exceptions import MapDecodeError, MapReadError, MapStorageError
from floorgrid.grid.model import FloorMap
from floorgrid.log import get_logger
from floorgrid.storage.codec import dumps_map, loads_map
from floorgrid.tools import paths

logger = get_logger(__name__)


def _write_atomic(path: str, text: str) -> None:
    directory = os.path.dirname(path) or "."
    os.makedirs(directory, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=directory, prefix=".tmp-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp, path)
    except BaseException:
        if os.path.exists(tmp):
            os.remove(tmp)
        raise


def save_map(fmap: FloorMap, directory: str | None = None) -> str:
    """Write <ID>.json into the map store. Returns the path written."""
    path = paths.map_json_path(fmap.id, directory)
    ctx = {"map_id": str(fmap.id), "path": path}
    logger.info("Saving map", extra=ctx)
    try:
        _write_atomic(path, dumps_map(fmap))
    except OSError as e:
        raise MapStorageError(f"Could not write map to {path}: {e}", {"path": path}) from e
    return path


def load_map(map_id, directory: str | None = None) -> FloorMap:
    """
    Read a stored map.

    Raises MapReadError if the file is missing or unreadable, and
    MapDecodeError if its content is not a valid map.
    """
    path = paths.map_json_path(map_id, directory)
    ctx = {"map_id": str(map_id), "path": path}
    logger.info("Loading map", extra=ctx)

    try:
        with open(path, "rb") as f:
            raw = f.read()
    except OSError as e:
        logger.warning("Map file unreadable: %s", e, extra=ctx)
        raise MapReadError(f"Could not read map file {path}: {e}", {"path": path}) from e

    try:
        return loads_map(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise MapDecodeError(f"{path}: not UTF-8 text", {"path": path}) from e
    except MapDecodeError as e:
        e.details.setdefault("path", path)
        logger.warning("Map file malformed: %s", e.message, extra=ctx)
        raise


def _read_header(path: str):
    with open(path, "r", encoding="utf-8") as f:
        obj = json.load(f)
    if not isinstance(obj, dict):
        return None
    id_string = obj.get("id") or obj.get("mapId")
    if id_string is None:
        return None
    return uuid.UUID(str(id_string)), obj.get("title") or "Map"


def list_maps(directory: str | None = None) -> list[tuple[uuid.UUID, str]]:
    """(id, title) for every readable map in the store, newest file first."""
    directory = directory or paths.maps_dir()
    if not os.path.isdir(directory):
        return []

    found = []
    for name in os.listdir(directory):
        stem, ext = os.path.splitext(name)
        if ext.lower() != ".json":
            continue
        try:
            uuid.UUID(stem)
        except ValueError:
            continue
        path = os.path.join(directory, name)
        try:
            header = _read_header(path)
            mtime = os.path.getmtime(path)
        except (OSError, ValueError) as e:
            logger.warning("Skipping unreadable map file: %s", e, extra={"path": path})
            continue
        if header is None:
            continue
        found.append((mtime, header))

    found.sort(key=lambda item: item[0], reverse=True)
    return [header for _, header in found]


def delete_map(map_id, directory: str | None = None) -> bool:
    """Remove a stored map. Returns False if there was nothing to remove."""
    path = paths.map_json_path(map_id, directory)
    try:
        os.remove(path)
    except FileNotFoundError:
        return False
    except OSError as e:
        raise MapStorageError(f"Could not delete {path}: {e}", {"path": path}) from e
    logger.info("Deleted map", extra={"map_id": str(map_id), "path": path})
    return True

from __future__ import annotations

import io
import json
import logging
import uuid

import pytest

from floorgrid.cli import main
from floorgrid.grid import Cell
from floorgrid.storage import list_maps, load_map, save_map

from utils_grid import make_map, rect_cells


def _run(capsys, *argv):
    main(list(argv))
    return capsys.readouterr().out


def _saved_room():
    fmap = make_map(10, 8, walls=rect_cells(3, 2, 6, 4), resolution=0.1, title="Room")
    save_map(fmap)
    return fmap


def test_new_then_list(store_dir, capsys):
    out = _run(capsys, "new", "Kitchen", "--width", "12", "--height", "9", "--resolution", "0.05")
    assert "12x9 @ 0.05m" in out

    maps = list_maps()
    assert len(maps) == 1
    map_id, title = maps[0]
    assert title == "Kitchen"
    assert str(map_id).upper() in out

    out = _run(capsys, "list")
    assert f"{str(map_id).upper()}  Kitchen" in out


def test_new_rejects_bad_dimensions(store_dir, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["new", "Bad", "--width", "0", "--height", "4", "--resolution", "0.05"])
    assert exc_info.value.code == 1
    assert "Error:" in capsys.readouterr().err
    assert list_maps() == []


def test_list_empty_store(store_dir, capsys):
    assert "No maps found" in _run(capsys, "list")


def test_contours_writes_json(store_dir, tmp_path, capsys):
    fmap = _saved_room()
    out_file = tmp_path / "out" / "contours.json"
    out = _run(capsys, "contours", str(fmap.id), "--out", str(out_file))
    assert "Contours: 1" in out

    payload = json.loads(out_file.read_text())
    assert payload["mapId"] == str(fmap.id).upper()
    assert payload["units"] == "grid"
    assert len(payload["contours"]) == 1
    for x, y in payload["contours"][0]:
        assert 0 <= x <= 10 and 0 <= y <= 8


def test_contours_in_world_units(store_dir, tmp_path, capsys):
    fmap = _saved_room()
    out_file = tmp_path / "world.json"
    _run(capsys, "contours", str(fmap.id), "--world", "--out", str(out_file))
    payload = json.loads(out_file.read_text())
    assert payload["units"] == "m"
    for x, z in payload["contours"][0]:
        assert 0.0 <= x <= 1.0 and 0.0 <= z <= 0.8


def test_distance_is_stored(store_dir, capsys):
    fmap = _saved_room()
    out = _run(capsys, "distance", str(fmap.id))
    assert "Distance field: 10x8" in out
    assert "unreachable 0" in out

    back = load_map(fmap.id)
    assert back.distance_field is not None
    assert back.distance_field.at(3, 2) == 0.0


def test_beacon_is_stored(store_dir, capsys):
    fmap = _saved_room()
    out = _run(capsys, "beacon", str(fmap.id), "0.25", "0.5", "door")
    assert "'door'" in out
    back = load_map(fmap.id)
    assert [(b.name, b.position) for b in back.beacons] == [("door", (0.25, 0.5))]


def test_doorway_carves_walls(store_dir, capsys):
    fmap = make_map(20, 20, walls=[(10, y) for y in range(20)], resolution=0.1)
    save_map(fmap)
    out = _run(capsys, "doorway", str(fmap.id), "0.55", "1.05", "1.55", "1.05", "--width", "0.4")
    assert "Added doorway" in out

    back = load_map(fmap.id)
    assert len(back.doorways) == 1
    assert back.cell_at(10, 10) is Cell.FREE
    assert back.wall_count() < 20


def test_delete(store_dir, capsys):
    fmap = _saved_room()
    assert "Deleted" in _run(capsys, "delete", str(fmap.id))
    assert list_maps() == []
    with pytest.raises(SystemExit) as exc_info:
        main(["delete", str(fmap.id)])
    assert exc_info.value.code == 1


def test_missing_map_exits_with_error(store_dir, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["contours", str(uuid.uuid4())])
    assert exc_info.value.code == 1
    assert "Error:" in capsys.readouterr().err


def test_corrupt_map_exits_with_error(store_dir, capsys):
    map_id = uuid.uuid4()
    store_dir.mkdir(parents=True)
    (store_dir / f"{str(map_id).upper()}.json").write_text('{"id": NaN}')
    with pytest.raises(SystemExit) as exc_info:
        main(["distance", str(map_id)])
    assert exc_info.value.code == 1


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1


def test_json_log_format(store_dir, monkeypatch):
    stream = io.StringIO()
    handler = logging.StreamHandler(stream)
    monkeypatch.setattr(logging.getLogger(), "handlers", [handler])
    monkeypatch.setenv("FLOORGRID_LOG_FORMAT", "json")
    map_id = str(uuid.uuid4())

    with pytest.raises(SystemExit):
        main(["contours", map_id])

    entries = [json.loads(line) for line in stream.getvalue().splitlines()]
    error = next(e for e in entries if e["level"] == "ERROR")
    assert error["logger"] == "floorgrid.cli"
    assert error["command"] == "contours"
    assert error["path"].endswith(f"{map_id.upper()}.json")
    assert "Could not read map file" in error["message"]

    warning = next(e for e in entries if e["level"] == "WARNING")
    assert warning["logger"] == "floorgrid.storage.map_store"
    assert warning["map_id"] == map_id


def test_contours_out_path_that_cannot_be_written(store_dir, tmp_path, capsys):
    fmap = _saved_room()
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(SystemExit) as exc_info:
        main(["contours", str(fmap.id), "--out", str(blocker / "contours.json")])
    assert exc_info.value.code == 1
    assert "Error: could not write" in capsys.readouterr().err

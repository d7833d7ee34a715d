"""
JSON schema for stored maps.

{
  "id": "UUID",
  "title": str,
  "spec": {"resolution": float, "width": int, "height": int, "originWorldXZ": [x, z]},
  "grid": [0|1, ...],                      # width*height, row-major
  "doorways": [{"id", "pointA": [x, z], "pointB": [x, z], "width"}],
  "beacons": [{"id", "position": [x, z], "name"}],
  "distanceField": {"width", "height", "meters": [float|"NaN"|"Infinity"|"-Infinity", ...]}  # optional
}

JSON has no non-finite literals, so NaN/Infinity/-Infinity are written as
those exact strings and only those strings are accepted back.
"""
from __future__ import annotations

import json
import math
import uuid

import numpy as np

from floorgrid.exceptions import MapDecodeError
from floorgrid.grid.model import Beacon, Cell, DistanceField, Doorway, FloorMap, GridSpec

NAN_TOKEN = "NaN"
POS_INF_TOKEN = "Infinity"
NEG_INF_TOKEN = "-Infinity"

_TOKENS = {
    NAN_TOKEN: float("nan"),
    POS_INF_TOKEN: float("inf"),
    NEG_INF_TOKEN: float("-inf"),
}


def encode_float(v):
    v = float(v)
    if math.isnan(v):
        return NAN_TOKEN
    if math.isinf(v):
        return POS_INF_TOKEN if v > 0 else NEG_INF_TOKEN
    return v


def encode_float32(v: np.float32):
    # str() of a float32 is its shortest round-tripping form ("0.05", not 0.0500000007...)
    if not np.isfinite(v):
        return encode_float(v)
    return float(str(v))


def decode_float(value, where: str) -> float:
    if isinstance(value, bool):
        raise MapDecodeError(f"{where}: expected a number, got a boolean", {"field": where})
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            raise MapDecodeError(f"{where}: number out of range", {"field": where}) from None
    if isinstance(value, str):
        if value in _TOKENS:
            return _TOKENS[value]
        raise MapDecodeError(f"{where}: unrecognized float token {value!r}", {"field": where})
    raise MapDecodeError(f"{where}: expected a number, got {type(value).__name__}", {"field": where})


def _reject_constant(name):
    raise MapDecodeError(f"bare {name} literal is not valid; use the string token {name!r}")


def _require(obj, key: str, where: str):
    if not isinstance(obj, dict):
        raise MapDecodeError(f"{where}: expected an object", {"field": where})
    if key not in obj:
        raise MapDecodeError(f"{where}: missing field {key!r}", {"field": f"{where}.{key}"})
    return obj[key]


def _decode_int(value, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise MapDecodeError(f"{where}: expected an integer", {"field": where})
    return value


def _decode_vec2(value, where: str) -> tuple[float, float]:
    if not isinstance(value, list) or len(value) != 2:
        raise MapDecodeError(f"{where}: expected a 2-element array", {"field": where})
    return decode_float(value[0], f"{where}[0]"), decode_float(value[1], f"{where}[1]")


def _decode_uuid(value, where: str) -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise MapDecodeError(f"{where}: invalid UUID {value!r}", {"field": where}) from None


def _encode_vec2(v):
    return [encode_float(v[0]), encode_float(v[1])]


def _encode_uuid(u: uuid.UUID) -> str:
    return str(u).upper()


# ---------------------------------------------------------------------------
# encode
# ---------------------------------------------------------------------------

def map_to_dict(fmap: FloorMap) -> dict:
    spec = fmap.spec
    out = {
        "id": _encode_uuid(fmap.id),
        "title": fmap.title,
        "spec": {
            "resolution": encode_float(spec.resolution),
            "width": int(spec.width),
            "height": int(spec.height),
            "originWorldXZ": _encode_vec2(spec.origin_world_xz),
        },
        "grid": [int(c) for c in fmap.grid.tolist()],
        "doorways": [
            {
                "id": _encode_uuid(d.id),
                "pointA": _encode_vec2(d.a),
                "pointB": _encode_vec2(d.b),
                "width": encode_float(d.width),
            }
            for d in fmap.doorways
        ],
        "beacons": [
            {
                "id": _encode_uuid(b.id),
                "position": _encode_vec2(b.position),
                "name": b.name,
            }
            for b in fmap.beacons
        ],
    }
    if fmap.distance_field is not None:
        df = fmap.distance_field
        out["distanceField"] = {
            "width": int(df.width),
            "height": int(df.height),
            "meters": [encode_float32(v) for v in df.meters],
        }
    return out


def dumps_map(fmap: FloorMap) -> str:
    # allow_nan=False: a non-finite float that slipped past encode_float is a bug
    return json.dumps(map_to_dict(fmap), indent=2, sort_keys=True, allow_nan=False)


# ---------------------------------------------------------------------------
# decode
# ---------------------------------------------------------------------------

def _decode_spec(obj) -> GridSpec:
    try:
        return GridSpec(
            resolution=decode_float(_require(obj, "resolution", "spec"), "spec.resolution"),
            width=_decode_int(_require(obj, "width", "spec"), "spec.width"),
            height=_decode_int(_require(obj, "height", "spec"), "spec.height"),
            origin_world_xz=_decode_vec2(_require(obj, "originWorldXZ", "spec"), "spec.originWorldXZ"),
        )
    except ValueError as e:
        raise MapDecodeError(f"spec: {e}", {"field": "spec"}) from e


def _decode_grid(values, spec: GridSpec) -> np.ndarray:
    if not isinstance(values, list):
        raise MapDecodeError("grid: expected an array", {"field": "grid"})
    if len(values) != spec.cell_count:
        raise MapDecodeError(
            f"grid: {len(values)} cells, expected {spec.width}x{spec.height}",
            {"field": "grid"},
        )
    allowed = (int(Cell.FREE), int(Cell.WALL))
    for i, v in enumerate(values):
        if isinstance(v, bool) or v not in allowed:
            raise MapDecodeError(f"grid[{i}]: expected 0 or 1, got {v!r}", {"field": f"grid[{i}]"})
    return np.asarray(values, dtype=np.uint8)


def _decode_doorway(obj, i: int) -> Doorway:
    where = f"doorways[{i}]"
    # older files use "a"/"b"
    a = obj.get("pointA", obj.get("a")) if isinstance(obj, dict) else None
    b = obj.get("pointB", obj.get("b")) if isinstance(obj, dict) else None
    if a is None or b is None:
        raise MapDecodeError(f"{where}: missing field 'pointA'/'pointB'", {"field": where})
    return Doorway(
        a=_decode_vec2(a, f"{where}.pointA"),
        b=_decode_vec2(b, f"{where}.pointB"),
        width=decode_float(_require(obj, "width", where), f"{where}.width"),
        id=_decode_uuid(_require(obj, "id", where), f"{where}.id"),
    )


def _decode_beacon(obj, i: int) -> Beacon:
    where = f"beacons[{i}]"
    name = _require(obj, "name", where)
    if not isinstance(name, str):
        raise MapDecodeError(f"{where}.name: expected a string", {"field": f"{where}.name"})
    return Beacon(
        position=_decode_vec2(_require(obj, "position", where), f"{where}.position"),
        name=name,
        id=_decode_uuid(_require(obj, "id", where), f"{where}.id"),
    )


def _decode_distance_field(obj, spec: GridSpec) -> DistanceField:
    w = _decode_int(_require(obj, "width", "distanceField"), "distanceField.width")
    h = _decode_int(_require(obj, "height", "distanceField"), "distanceField.height")
    if (w, h) != (spec.width, spec.height):
        raise MapDecodeError(
            f"distanceField: {w}x{h} does not match grid {spec.width}x{spec.height}",
            {"field": "distanceField"},
        )
    meters = _require(obj, "meters", "distanceField")
    if not isinstance(meters, list) or len(meters) != w * h:
        raise MapDecodeError(f"distanceField.meters: expected {w * h} values", {"field": "distanceField.meters"})
    values = [decode_float(v, f"distanceField.meters[{i}]") for i, v in enumerate(meters)]
    return DistanceField(width=w, height=h, meters=np.asarray(values, dtype=np.float32))


def _list_field(obj, key: str) -> list:
    value = _require(obj, key, "map")
    if not isinstance(value, list):
        raise MapDecodeError(f"{key}: expected an array", {"field": key})
    return value


def map_from_dict(obj) -> FloorMap:
    map_id = _decode_uuid(_require(obj, "id", "map"), "id")
    title = _require(obj, "title", "map")
    if not isinstance(title, str):
        raise MapDecodeError("title: expected a string", {"field": "title"})
    spec = _decode_spec(_require(obj, "spec", "map"))
    grid = _decode_grid(_require(obj, "grid", "map"), spec)

    fmap = FloorMap(title, spec, grid=grid, map_id=map_id)
    fmap.doorways = [_decode_doorway(d, i) for i, d in enumerate(_list_field(obj, "doorways"))]
    fmap.beacons = [_decode_beacon(b, i) for i, b in enumerate(_list_field(obj, "beacons"))]

    df = obj.get("distanceField")
    if df is not None:
        fmap.distance_field = _decode_distance_field(df, spec)
    return fmap


def loads_map(text) -> FloorMap:
    try:
        obj = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise MapDecodeError(f"malformed JSON: {e}") from e
    return map_from_dict(obj)

"""Centralized path resolution for stored maps."""

import os

_DEFAULT_MAPS_ROOT = os.path.join("resources", "maps")


def maps_dir() -> str:
    """Map store directory; FLOORGRID_MAPS_DIR overrides the default."""
    return os.environ.get("FLOORGRID_MAPS_DIR", _DEFAULT_MAPS_ROOT)


def map_json_path(map_id, directory: str | None = None) -> str:
    return os.path.join(directory or maps_dir(), f"{str(map_id).upper()}.json")

"""
Storage: JSON map schema and the on-disk map store.
"""
from .codec import decode_float, dumps_map, encode_float, loads_map, map_from_dict, map_to_dict
from .map_store import delete_map, list_maps, load_map, save_map

__all__ = [
    "decode_float",
    "dumps_map",
    "encode_float",
    "loads_map",
    "map_from_dict",
    "map_to_dict",
    "delete_map",
    "list_maps",
    "load_map",
    "save_map",
]

"""
Tools: path resolution for the on-disk map store.
"""

__all__ = [
    "paths",
]

import json
import logging
import os

_EXTRA_KEYS = ("map_id", "path", "command", "width", "height")


class JsonFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record):
        entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_KEYS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def log_level() -> str:
    return os.environ.get("FLOORGRID_LOG_LEVEL", "INFO").upper()


def configure_logging() -> None:
    """Set up the root logger from FLOORGRID_LOG_LEVEL / FLOORGRID_LOG_FORMAT."""
    logging.basicConfig(level=log_level(), format="%(levelname)s: %(message)s")
    if os.environ.get("FLOORGRID_LOG_FORMAT", "").lower() == "json":
        root = logging.getLogger()
        for handler in root.handlers:
            handler.setFormatter(JsonFormatter())


def get_logger(name):
    """Return a named logger under the floorgrid namespace."""
    if not name.startswith("floorgrid"):
        name = f"floorgrid.{name}"
    return logging.getLogger(name)

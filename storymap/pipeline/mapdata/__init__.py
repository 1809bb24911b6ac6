"""Map snapshot — dataclasses, parsing, validation, and serialization."""

from .models import (
    Location, Chapter, StyleSettings, ExportSettings, MapData,
)
from .parsing import parse_map_data
from .validation import validate_map_data
from .serialization import map_data_to_dict

__all__ = [
    # Models
    "Location", "Chapter", "StyleSettings", "ExportSettings", "MapData",
    # Parsing / Validation / Serialization
    "parse_map_data", "validate_map_data", "map_data_to_dict",
]

"""Journey templates — load, validate, query, and serialize templates/data/*.json."""

from .models import Waypoint, Template, TemplateCatalog, TemplateLookup, ValidationError
from .loader import load_templates, parse_template, TEMPLATES_DIR
from .serialization import template_to_dict, catalog_to_dict

__all__ = [
    # Models
    "Waypoint", "Template", "TemplateCatalog", "TemplateLookup", "ValidationError",
    # Loader
    "load_templates", "parse_template", "TEMPLATES_DIR",
    # Serialization
    "template_to_dict", "catalog_to_dict",
]

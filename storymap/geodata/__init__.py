"""Geodata — real geographic features for the export's geographic layer.

Submodules:
  models   GeographicFeature and the FeatureSource protocol.
  geojson  GeoJSON flattening, classification and de-duplication.
  client   FeatureServiceSource (OGC API – Features) and StaticFeatureSource.
"""

from .models import GeographicFeature, FeatureSource, FEATURE_TYPES, CATEGORY_COLLECTIONS
from .geojson import (
    flatten_geometry, classify, features_from_geojson, dedupe_features, load_geojson_features,
)
from .client import FeatureServiceSource, StaticFeatureSource

__all__ = [
    # Models
    "GeographicFeature", "FeatureSource", "FEATURE_TYPES", "CATEGORY_COLLECTIONS",
    # GeoJSON
    "flatten_geometry", "classify", "features_from_geojson", "dedupe_features",
    "load_geojson_features",
    # Sources
    "FeatureServiceSource", "StaticFeatureSource",
]

"""StoryMap — personalised story maps turned into engraved and cut panels.

Subpackages:
  pipeline   Manufacturing export: map data, geo, layers, encoders, export.
  orders     Order records and the status lifecycle.
  geodata    Real geographic features from a feature service or GeoJSON.
  templates  Journey templates bundled with the package.
  config     Materials, sizes, machine settings and environment.
  web        FastAPI operations server.
"""

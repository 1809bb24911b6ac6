"""Pipeline stages — map data, geo, layers, encoders, export.

Every stage works on the immutable map snapshot taken when the order was
placed.  The stages in order:

  mapdata   — typed snapshot of locations, chapters, style and export settings
  geo       — bounds resolution and the geographic → canvas projection
  layers    — cut, text, geographic-feature and route-path geometry
  encoders  — SVG and DXF writers for the layer geometry
  export    — orchestration, combined files and production documents
"""

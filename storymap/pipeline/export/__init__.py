"""Export — orchestration, production documents and bundle writing.

Submodules:
  models     ManufacturingExport and LayerFiles.
  documents  Material sheet, production instructions, process guide.
  engine     ManufacturingExporter (async, all-or-nothing).
  writer     write_export: atomic on-disk bundle.
"""

from .models import ManufacturingExport, LayerFiles
from .engine import ManufacturingExporter, build_projection, FEATURE_CATEGORIES
from .documents import material_sheet, production_instructions, process_guide
from .writer import write_export, export_manifest

__all__ = [
    # Models
    "ManufacturingExport", "LayerFiles",
    # Engine
    "ManufacturingExporter", "build_projection", "FEATURE_CATEGORIES",
    # Documents
    "material_sheet", "production_instructions", "process_guide",
    # Writer
    "write_export", "export_manifest",
]

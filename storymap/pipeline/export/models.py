"""Export bundle dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class LayerFiles:
    svg: str
    dxf: str
    primitive_count: int = 0


@dataclass(frozen=True)
class ManufacturingExport:
    """Everything the workshop needs for one order, produced in memory."""

    order_id: str
    order_number: str
    files: dict[str, str]                   # filename → file text
    layers: dict[str, LayerFiles]           # layer name → encoded layer
    combined_svg: str
    combined_dxf: str
    documents: dict[str, str]               # "material_sheet" | "production_instructions" | "process_guide"
    exported_at: datetime
    exported_by: str = "system"
    format_version: str = ""
    warnings: list[str] = field(default_factory=list)

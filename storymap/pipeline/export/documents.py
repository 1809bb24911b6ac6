"""Human-readable production documents.

Three plain-text documents travel with every export:

  material sheet           dimensions, material and default machine settings
  production instructions  ordered operator steps
  process guide            per-layer machine settings in processing order

Processing order is cut outline, deep geographic routing, route path,
then fine text last: heavier passes would damage fine engraving.
"""

from __future__ import annotations

from typing import Mapping

from storymap.config.materials import materials
from storymap.orders.models import Order
from storymap.pipeline.layers.models import LAYER_ORDER, LayerName

from .models import LayerFiles

LAYER_PURPOSE = {
    LayerName.CUT: "Outline cut and registration marks",
    LayerName.GEOGRAPHIC: "Coastlines, lakes, rivers and boundaries",
    LayerName.ROUTE: "Template journey route",
    LayerName.TEXT: "Title, markers, labels and legend",
}


def _inches(v: float) -> str:
    return f'{v:g}"'


def _date(order: Order) -> str:
    return order.created_at.strftime("%Y-%m-%d")


def material_sheet(order: Order, template_name: str) -> str:
    pd = order.production_data
    d, m, s = pd.dimensions, pd.material, pd.machine_settings
    lines = [
        "MATERIAL SPECIFICATION SHEET",
        f"Order: {order.order_number}",
        f"Date: {_date(order)}",
        "",
        "DIMENSIONS:",
        f"- Width: {_inches(d.width_in)}",
        f"- Height: {_inches(d.height_in)}",
        f"- Thickness: {_inches(d.thickness_in)}",
        "- Drawing Units: inches (DXF files: 1 unit = 1 inch)",
        "",
        "MATERIAL:",
        f"- Type: {m.name}",
        f"- Material Category: {m.type}",
        f"- Finish: {m.finish or 'Natural'}",
        f"- Engrave Depth: {_inches(m.engrave_depth_in)}",
        "",
        "MACHINE SETTINGS:",
        f"- Cut Speed: {s.cut_speed}",
        f"- Cut Power: {s.cut_power}%",
        f"- Engrave Speed: {s.engrave_speed}",
        f"- Engrave Power: {s.engrave_power}%",
        f"- Passes: {s.passes}",
        "",
        "CUSTOMER INFO:",
        f"- Name: {order.customer.name}",
        f"- Order Date: {_date(order)}",
        f"- Template: {template_name or 'None'}",
    ]
    return "\n".join(lines) + "\n"


def production_instructions(order: Order, template_name: str, filenames: Mapping[str, str]) -> str:
    pd = order.production_data
    style = order.map_data.style
    lines = [
        "PRODUCTION INSTRUCTIONS",
        f"Order #{order.order_number}",
        "",
        "1. MATERIAL PREP:",
        f"   - Verify material: {pd.material.name}",
        f"   - Check dimensions: {_inches(pd.dimensions.width_in)} x {_inches(pd.dimensions.height_in)}",
        "   - Ensure material is flat and secure",
        "",
        "2. CNC/LASER SETUP:",
        f"   - Load combined file: {filenames['combined_dxf']} (or {filenames['combined_svg']})",
        "   - Confirm the four registration marks line up on every layer",
        "   - Set material parameters per specification sheet and process guide",
        "",
        "3. PRODUCTION STEPS:",
    ]
    for i, name in enumerate(LAYER_ORDER, 1):
        lines.append(f"   {i}) {name}: {LAYER_PURPOSE[name]}")
    lines += [
        "   - Run each layer to completion before starting the next",
        "",
        "4. QUALITY CHECK:",
        "   - Verify all engraving is complete and legible",
        "   - Check cut edges are clean",
        "   - Confirm dimensions match specification",
        "",
        "5. FINISHING:",
        "   - Light sanding if needed",
        "   - Apply finish if specified",
        "   - Clean thoroughly before packaging",
        "",
        "SPECIAL NOTES:",
        f"- Template: {template_name or 'None'}",
        f"- Theme: {style.theme}",
        f"- Customer requested: {order.map_data.export_settings.orientation} orientation",
    ]
    return "\n".join(lines) + "\n"


def process_guide(order: Order, layers: Mapping[str, LayerFiles], filenames: Mapping[str, str]) -> str:
    material = order.production_data.material
    settings = materials.layer_settings(material.type)
    lines = [
        "MULTI-LAYER MANUFACTURING PROCESS GUIDE",
        f"Order #{order.order_number}",
        f"Material: {material.name} ({material.type})",
        "",
        "Process the layers in this order. Heavier operations come first so",
        "they cannot damage the fine text engraving.",
        "",
    ]
    for i, name in enumerate(LAYER_ORDER, 1):
        ls = settings[name]
        lf = layers.get(name)
        count = lf.primitive_count if lf else 0
        lines += [
            f"STEP {i}: {name} ({ls.operation})",
            f"   Purpose: {LAYER_PURPOSE[name]}",
            f"   File: {filenames.get(name, '-')}",
            f"   Elements: {count}",
            f"   Speed: {ls.speed}",
            f"   Power: {ls.power}%",
            f"   Passes: {ls.passes}",
        ]
        if ls.depth_in is not None:
            lines.append(f"   Depth: {_inches(ls.depth_in)}")
        if count == 0:
            lines.append("   (empty layer, skip)")
        lines.append("")
    return "\n".join(lines)

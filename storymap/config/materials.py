"""
Material configuration — single source of truth for sizes, materials and
machine settings.

Loads config/materials.json once and exposes typed accessors.
"""

from __future__ import annotations
import json
from dataclasses import dataclass
from pathlib import Path
from functools import lru_cache


_CONFIG_PATH = Path(__file__).resolve().parent / "materials.json"


@lru_cache(maxsize=1)
def _load() -> dict:
    return json.loads(_CONFIG_PATH.read_text(encoding="utf-8"))


@dataclass(frozen=True)
class MaterialSpec:
    id: str
    name: str
    type: str                           # "wood" | "metal" | "acrylic"
    finish: str
    engrave_depth_in: float


@dataclass(frozen=True)
class MachineSettings:
    cut_speed: int
    cut_power: int
    engrave_speed: int
    engrave_power: int
    passes: int


@dataclass(frozen=True)
class LayerSettings:
    operation: str
    speed: int
    power: int
    passes: int
    depth_in: float | None = None


class _Materials:
    """Typed accessor for material config."""

    # ── sizes ───────────────────────────────────────────────────────
    @property
    def sizes(self) -> dict:
        return _load()["sizes"]

    @property
    def default_size(self) -> str:
        return _load()["default_size"]

    @property
    def default_thickness(self) -> float:
        return _load()["default_thickness_in"]

    def size_inches(self, size_id: str) -> tuple[float, float] | None:
        s = _load()["sizes"].get(size_id)
        if s is None:
            return None
        return float(s["width_in"]), float(s["height_in"])

    # ── materials ───────────────────────────────────────────────────
    @property
    def material_ids(self) -> list[str]:
        return list(_load()["materials"])

    def material(self, material_id: str) -> MaterialSpec:
        """Resolve a material id; unknown ids fall back to the default material."""
        mats = _load()["materials"]
        if material_id not in mats:
            material_id = _load()["default_material"]
        m = mats[material_id]
        return MaterialSpec(
            id=material_id,
            name=m["name"],
            type=m["type"],
            finish=m["finish"],
            engrave_depth_in=m["engrave_depth_in"],
        )

    # ── machine settings ────────────────────────────────────────────
    def machine_settings(self, material_type: str) -> MachineSettings:
        table = _load()["machine_settings"]
        return MachineSettings(**table.get(material_type, table["wood"]))

    def layer_settings(self, material_type: str) -> dict[str, LayerSettings]:
        """Per-layer machine settings keyed by layer name."""
        table = _load()["layer_settings"]
        rows = table.get(material_type, table["wood"])
        return {name: LayerSettings(**row) for name, row in rows.items()}


materials = _Materials()

"""Shared physical constants for the manufacturing export.

These values describe the canvas the panel is cut from: the unit system,
how far the cut line sits inside the sheet edge and how much room the
map content leaves around itself.  The bounds resolver, the projector and
every layer generator read their parameters from this single source of
truth so that independently generated layers stay registered.

Change a value here and all layers and both file formats move together.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExportRules:
    """Physical rules for the exported panel.

    Canvas distances are in points (1/72 in) unless the name says inches.
    """

    points_per_inch: float = 72.0
    """Canvas units per physical inch."""

    cut_margin_in: float = 0.125
    """Inset of the cut line from the sheet edge."""

    content_margin_in: float = 0.5
    """Inset of the map content box from the sheet edge."""

    padding_ratio: float = 0.1
    """Proportional padding added to each side of the raw bounds."""

    min_padding_deg: float = 1.0
    """Padding used on an axis whose raw span is zero (single point)."""

    registration_mark_pt: float = 6.0
    """Half-length of each registration cross arm."""

    label_offset_pt: float = 19.0
    """Minimum drop from a marker centre to its name label baseline."""

    label_separation_pt: float = 4.0
    """Minimum vertical gap kept between two label boxes."""

    marker_radius_pt: float = 4.0
    """Radius of an icon / image marker circle."""

    legend_max_chapters: int = 5
    """Chapters listed in the journey-highlights legend."""

    # ── Derived helpers ────────────────────────────────────────────

    @property
    def cut_margin_pt(self) -> float:
        return self.cut_margin_in * self.points_per_inch

    @property
    def content_margin_pt(self) -> float:
        return self.content_margin_in * self.points_per_inch


# Module-level singleton, importable everywhere.
EXPORT_RULES = ExportRules()

FORMAT_VERSION = "2.0"
"""Version tag written into every export bundle."""

"""Geographic feature dataclasses and the source protocol."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from storymap.pipeline.geo.models import GeoBounds, GeoPoint


FEATURE_TYPES = ("coastline", "lake", "river", "boundary")

# Request category → (collection id, feature type) pairs queried for it.
CATEGORY_COLLECTIONS: dict[str, tuple[tuple[str, str], ...]] = {
    "water": (("coastlines", "coastline"), ("lakes", "lake"), ("rivers", "river")),
    "admin": (("boundaries", "boundary"),),
}


@dataclass(frozen=True)
class GeographicFeature:
    id: str
    name: str
    type: str                           # "coastline" | "lake" | "river" | "boundary"
    coordinates: tuple[GeoPoint, ...]

    @property
    def is_closed(self) -> bool:
        return len(self.coordinates) > 2 and self.coordinates[0] == self.coordinates[-1]


class FeatureSource(Protocol):
    """Anything that can supply real geographic features for a region."""

    def ensure_configured(self) -> None:
        """Raise MissingCredential if the source cannot be queried at all."""
        ...

    async def fetch_features(
        self, bounds: GeoBounds, categories: Sequence[str],
    ) -> list[GeographicFeature]:
        ...

"""Feature sources — where real coastlines, lakes, rivers and boundaries come from.

``FeatureServiceSource`` queries an OGC API – Features service:

  GET {base_url}/collections/{collection}/items?bbox=W,S,E,N&limit=1000

following ``rel="next"`` links for up to ``MAX_PAGES`` pages per collection;
a collection with more pages than that fails with ``TooManyFeatures``
rather than returning part of the coastline.  Configure with:
  - STORYMAP_FEATURES_URL      (service root)
  - STORYMAP_FEATURES_API_KEY  (sent as a bearer token)

``StaticFeatureSource`` serves a pre-loaded list of real features, e.g.
from ``load_geojson_features``.  Neither source ever invents geometry:
an empty result is an error, not an empty map.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field
from typing import Callable, Sequence

import requests

from storymap.config.env import FEATURES_KEY_VAR, FEATURES_URL_VAR
from storymap.pipeline.errors import (
    FeatureSourceNetworkError,
    MissingCredential,
    NoFeaturesFound,
    TooManyFeatures,
)
from storymap.pipeline.geo.models import GeoBounds

from .geojson import dedupe_features, features_from_geojson
from .models import CATEGORY_COLLECTIONS, GeographicFeature

log = logging.getLogger(__name__)

PAGE_LIMIT = 1000
MAX_PAGES = 10
MAX_ATTEMPTS = 3
BASE_DELAY_S = 1.0
TIMEOUT_S = 15.0


def _in_bounds(f: GeographicFeature, b: GeoBounds) -> bool:
    return any(
        b.min_lat <= p.lat <= b.max_lat and b.min_lng <= p.lng <= b.max_lng
        for p in f.coordinates
    )


@dataclass
class FeatureServiceSource:
    base_url: str = field(default_factory=lambda: os.environ.get(FEATURES_URL_VAR, ""))
    api_key: str = field(default_factory=lambda: os.environ.get(FEATURES_KEY_VAR, ""))
    session: requests.Session = field(default_factory=requests.Session)
    sleep: Callable[[float], None] = time.sleep

    def ensure_configured(self) -> None:
        missing = [
            name for name, value in ((FEATURES_URL_VAR, self.base_url), (FEATURES_KEY_VAR, self.api_key))
            if not value
        ]
        if missing:
            raise MissingCredential(f"{', '.join(missing)} not set")

    async def fetch_features(
        self, bounds: GeoBounds, categories: Sequence[str],
    ) -> list[GeographicFeature]:
        self.ensure_configured()
        features = await asyncio.to_thread(self._fetch_all, bounds, tuple(categories))
        if not features:
            raise NoFeaturesFound(
                f"no {'/'.join(categories)} features in "
                f"lat {bounds.min_lat:.4f}..{bounds.max_lat:.4f}, "
                f"lng {bounds.min_lng:.4f}..{bounds.max_lng:.4f}"
            )
        return features

    # ── Blocking HTTP (runs in a worker thread) ────────────────────

    def _fetch_all(self, bounds: GeoBounds, categories: tuple[str, ...]) -> list[GeographicFeature]:
        bbox = f"{bounds.min_lng},{bounds.min_lat},{bounds.max_lng},{bounds.max_lat}"
        collected: list[GeographicFeature] = []
        for category in categories:
            for collection, default_type in CATEGORY_COLLECTIONS.get(category, ()):
                url: str | None = f"{self.base_url.rstrip('/')}/collections/{collection}/items"
                params: dict | None = {"bbox": bbox, "limit": PAGE_LIMIT}
                pages = 0
                while url and pages < MAX_PAGES:
                    page = self._get(url, params)
                    collected.extend(
                        features_from_geojson(page, default_type, id_prefix=f"{collection}-")
                    )
                    pages += 1
                    url = _next_link(page)
                    params = None
                if url:
                    raise TooManyFeatures(
                        f"{collection} still had more pages after {MAX_PAGES} pages of {PAGE_LIMIT}"
                    )
                log.info("Fetched %s: %d pages", collection, pages)
        return dedupe_features(collected)

    def _get(self, url: str, params: dict | None) -> dict:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/geo+json, application/json",
        }
        last_error = ""
        for attempt in range(MAX_ATTEMPTS):
            try:
                r = self.session.get(url, params=params, headers=headers, timeout=TIMEOUT_S)
            except requests.RequestException as e:
                last_error = str(e)
            else:
                if r.status_code in (401, 403):
                    raise MissingCredential(f"credential rejected (HTTP {r.status_code})")
                if r.status_code == 429 or r.status_code >= 500:
                    last_error = f"HTTP {r.status_code}"
                elif r.status_code >= 400:
                    raise FeatureSourceNetworkError(f"HTTP {r.status_code} from {url}")
                else:
                    try:
                        return r.json()
                    except ValueError as e:
                        raise FeatureSourceNetworkError(f"invalid JSON from {url}: {e}") from e

            if attempt < MAX_ATTEMPTS - 1:
                delay = BASE_DELAY_S * (2 ** attempt)
                log.warning(
                    "Feature service request failed (%s); retrying in %.0fs (attempt %d/%d)",
                    last_error, delay, attempt + 1, MAX_ATTEMPTS,
                )
                self.sleep(delay)

        raise FeatureSourceNetworkError(f"{url}: {last_error} after {MAX_ATTEMPTS} attempts")


def _next_link(page: dict) -> str | None:
    for link in page.get("links") or []:
        if link.get("rel") == "next" and link.get("href"):
            return link["href"]
    return None


@dataclass
class StaticFeatureSource:
    """Serves real features loaded ahead of time, filtered to the requested region."""

    features: list[GeographicFeature]

    def ensure_configured(self) -> None:
        return None

    async def fetch_features(
        self, bounds: GeoBounds, categories: Sequence[str],
    ) -> list[GeographicFeature]:
        wanted = {t for c in categories for _, t in CATEGORY_COLLECTIONS.get(c, ())}
        found = [f for f in self.features if f.type in wanted and _in_bounds(f, bounds)]
        if not found:
            raise NoFeaturesFound(f"no {'/'.join(categories)} features in the loaded data")
        return found

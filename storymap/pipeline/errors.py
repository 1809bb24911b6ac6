"""Export pipeline errors.

Every failure raised while producing a manufacturing export derives from
``ExportError`` so callers can treat the export as one all-or-nothing
operation.  The geographic-source failures carry a ``cause`` and a
``user_message`` so the UI can tell "configure access" apart from "no
data for this region" and "try again later".
"""

from __future__ import annotations


class ExportError(Exception):
    """Base class for every manufacturing export failure."""


class InsufficientGeographicData(ExportError):
    """No locations and no template route region to size the map from."""

    def __init__(self, reason: str = "no locations and no template route bounds") -> None:
        self.reason = reason
        super().__init__(f"Cannot resolve map bounds: {reason}")


class MalformedGeometryInput(ExportError):
    """A coordinate that is non-finite or outside the valid lat/lng range."""

    def __init__(self, lat: float, lng: float, reason: str) -> None:
        self.lat = lat
        self.lng = lng
        self.reason = reason
        super().__init__(f"Malformed coordinate ({lat!r}, {lng!r}): {reason}")


class DegenerateCanvas(MalformedGeometryInput):
    """A sheet too small to leave any drawing area inside its margins."""

    def __init__(self, width_in: float, height_in: float, margin_in: float) -> None:
        self.width_in = width_in
        self.height_in = height_in
        self.margin_in = margin_in
        self.reason = "no content area inside the margins"
        ExportError.__init__(
            self,
            f"Sheet {width_in:g}x{height_in:g} in has no content area inside "
            f"{margin_in:g} in margins",
        )


class UnknownTemplate(ExportError):
    """The order references a template id the lookup does not know."""

    def __init__(self, template_id: str) -> None:
        self.template_id = template_id
        super().__init__(f"Unknown template '{template_id}'")


class ExternalFeatureSourceUnavailable(ExportError):
    """The geographic feature source could not supply real geography."""

    cause = "unavailable"
    user_message = "Geographic data is unavailable. The export was not created."

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{self.user_message} ({detail})")


class MissingCredential(ExternalFeatureSourceUnavailable):
    cause = "missing_credential"
    user_message = (
        "Access to geographic data is not configured. "
        "Set the feature service URL and API key, then retry the export."
    )


class NoFeaturesFound(ExternalFeatureSourceUnavailable):
    cause = "no_data"
    user_message = (
        "We could not find geographic data for this region. "
        "Check the map locations or choose a different area."
    )


class FeatureSourceNetworkError(ExternalFeatureSourceUnavailable):
    cause = "network"
    user_message = (
        "The geographic data service could not be reached. "
        "This is usually temporary; retry the export shortly."
    )


class TooManyFeatures(ExternalFeatureSourceUnavailable):
    cause = "too_much_data"
    user_message = (
        "This region holds more geographic data than one export can fetch. "
        "Zoom the map in to a smaller area and retry."
    )

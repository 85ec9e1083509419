# gpxrender/errors

"""
gpxrender.errors

Central exception hierarchy for gpxrender.

Rationale:
  - Modules should raise specific, meaningful errors.
  - Callers can catch GPXRenderError (broad) or specific subclasses (narrow).
  - The batch driver treats every GPXRenderError as a per-file failure.
"""


class GPXRenderError(RuntimeError):
    """Base class for all gpxrender runtime errors."""


# ---- GPX document errors -----------------------

class DocumentError(GPXRenderError):
    """Errors reading a GPX document into a Track."""

class MalformedDocumentError(DocumentError):
    """GPX is not well-formed XML or lacks the expected trk/trkseg/trkpt structure."""

class MissingMetadataError(DocumentError):
    """GPX <metadata> block lacks the mandatory <name> or <time> field."""


# ---- Geometry errors ---------------------------

class GeometryError(GPXRenderError):
    """Errors fitting a track onto the canvas."""

class DegenerateGeometryError(GeometryError):
    """Bounding box cannot produce a finite, positive scale."""


# ---- Rendering errors --------------------------

class RenderError(GPXRenderError):
    """The drawing backend rejected the path or the stroke style."""


# ---- Configuration errors ----------------------

class ConfigError(GPXRenderError):
    """Configuration file or value is invalid."""

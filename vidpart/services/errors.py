"""Exception types raised by services and surfaced by the UI layer."""

from __future__ import annotations

__all__ = ["VidpartError", "ConfigError", "ProbeError", "SplitError"]


class VidpartError(Exception):
    """Base class for all errors reported to the user."""


class ConfigError(VidpartError):
    """Malformed ``VIDPART_*`` environment variable."""


class ProbeError(VidpartError):
    """Metadata could not be read from a media file."""


class SplitError(VidpartError):
    """The split executor failed; ``str(err)`` is shown to the user."""

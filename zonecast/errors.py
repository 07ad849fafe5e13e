"""Exception types shared across the engine."""


class ZonecastError(Exception):
    """Base class for all zonecast errors."""


class InvalidInput(ZonecastError, ValueError):
    """Malformed geometry, coordinates or time range. Always surfaced to the caller."""


class UpstreamUnavailable(ZonecastError):
    """Weather provider failure. Absorbed by the fetcher's fallback chain."""

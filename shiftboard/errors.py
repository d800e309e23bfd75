"""Exceptions raised outside the pure normalisation/aggregation core."""


class ShiftboardError(Exception):
    """Base class for dashboard errors surfaced per tenant or per sector."""


class DashboardConfigError(ShiftboardError):
    """Tenant configuration is missing, unreadable or invalid."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []


class SectorDataError(ShiftboardError):
    """The sector endpoint answered, but reported an error or had no rows."""


class SectorFetchError(ShiftboardError):
    """The sector endpoint could not be reached or answered with garbage."""

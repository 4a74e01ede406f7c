"""Application error types.

Routers translate these into HTTP responses; services raise them.
"""


class AgencyError(Exception):
    """Base class for application errors."""


class NotFoundError(AgencyError):
    """A referenced agent, creator or record does not exist."""


class CompensationConfigError(AgencyError, ValueError):
    """A compensation configuration is contradictory or incomplete."""

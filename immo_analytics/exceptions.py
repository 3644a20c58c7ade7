"""Custom exception hierarchy for immo-analytics."""


class ImmoAnalyticsError(Exception):
    """Base exception for all immo-analytics errors."""


class UnclassifiablePriceError(ImmoAnalyticsError):
    """Raised when a price falls into none of the configured price segments.

    The segment bands are contiguous up to infinity, so this indicates a
    programming error (e.g. a NaN price) rather than bad user input.
    """


class SeedDataError(ImmoAnalyticsError):
    """Raised when a seed data file is malformed or contains duplicate ids."""

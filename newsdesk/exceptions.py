class NewsdeskError(Exception):
    """Base class for every error the resolver can surface to a caller."""

    status_code = 500


class InvalidRequest(NewsdeskError):
    """Raised when required request fields (region, category) are missing."""

    status_code = 400


class FeedUnavailable(NewsdeskError):
    """Raised when the raw news feed cannot be reached, times out, or is unreadable."""


class NoNewsFound(NewsdeskError):
    """Raised when an initial page has no items left after exclusion filtering."""


class GenerationUnavailable(NewsdeskError):
    """Raised when the generation backend is rate-limited or out of quota."""

    status_code = 429


class GenerationError(NewsdeskError):
    """Raised for any other generation failure (bad key, network, empty reply)."""


class MalformedGenerationOutput(NewsdeskError):
    """Raised when generated text cannot be coerced into a result set."""

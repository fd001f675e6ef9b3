"""
Exception classes for tunebridge.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, and the hierarchy separates failures the resolver recovers from
locally from failures that must reach the caller.

Exception Hierarchy:
    TuneBridgeError (base)
        ConfigError - Configuration file or environment issues
        QuotaExhaustedError - Every video provider credential is exhausted
        ProviderError - Transient third-party failure (network, HTTP, JSON)
            SpotifyError - Track search provider failure
            LyricsError - Lyrics provider failure

Propagation:
    ProviderError is recovered per query inside the resolution loop.
    QuotaExhaustedError is NOT a ProviderError, so catching ProviderError
    never hides pool-wide quota exhaustion from the caller.
"""


class TuneBridgeError(Exception):
    """
    Base exception for all tunebridge errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (query, status, ...).

    Example:
        try:
            video_id = await resolver.resolve(title, artist)
        except TuneBridgeError as e:
            logger.error(f"Resolution failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'query': The search query being executed
                     - 'status': HTTP status code returned by a provider
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(TuneBridgeError):
    """
    Raised when there's an issue with the configuration.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml has invalid YAML syntax
        - A section is not a dictionary
        - Invalid field values (e.g., negative cache capacity)

    Example:
        raise ConfigError(
            "'cache.capacity' must be a positive integer",
            details={'field': 'cache.capacity', 'value': -1}
        )
    """
    pass


class QuotaExhaustedError(TuneBridgeError):
    """
    Raised when every video provider credential has been rejected for quota.

    The resolver propagates this to the caller so a playback UI can show a
    "service temporarily unavailable" state instead of "song not found".
    Credentials stay exhausted until reset_credentials() is called.

    Example:
        raise QuotaExhaustedError(
            "YouTube API quota exceeded on all credentials",
            details={'total_credentials': 3}
        )
    """
    pass


class ProviderError(TuneBridgeError):
    """
    Raised when a third-party provider call fails transiently.

    This is a NON-CRITICAL error for the resolver: the failing query is
    abandoned and the next query in the sequence is tried.

    Common causes:
        - Network connectivity issues or timeouts
        - Non-quota HTTP error status
        - Malformed JSON response

    Attributes:
        status: HTTP status code when the provider answered, else None.
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        status: int | None = None
    ) -> None:
        """
        Initialize provider error with the optional HTTP status.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            status: HTTP status code of the failed response, if any.
        """
        super().__init__(message, details)
        self.status = status


class SpotifyError(ProviderError):
    """
    Raised when the track search provider (Spotify) fails.

    Common causes:
        - Invalid credentials
        - Rate limiting
        - Network connectivity issues
    """
    pass


class LyricsError(ProviderError):
    """
    Raised when the lyrics provider fails.

    Lyrics are optional. This error is logged by the lyrics client and
    never propagated to stop a unified lookup.
    """
    pass

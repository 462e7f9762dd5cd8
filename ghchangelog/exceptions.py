"""Exceptions raised by ghchangelog."""


class ChangelogError(Exception):
    """Base exception for all ghchangelog errors."""


class ConfigError(ChangelogError):
    """Configuration file could not be loaded."""


class FetchError(ChangelogError):
    """Pull requests could not be fetched from GitHub."""


class AuthenticationError(FetchError):
    """GitHub rejected the token or the token lacks the required scope."""


class TransientFetchError(FetchError):
    """Network or HTTP failure while paging through pull requests."""


class RangeResolutionError(ChangelogError):
    """The git revision range could not be resolved."""

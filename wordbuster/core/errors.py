"""Exceptions raised before any probe is dispatched."""


class WordbusterError(Exception):
    """Base class for fatal startup errors."""


class ConfigError(WordbusterError, ValueError):
    """Invalid or conflicting scan configuration."""


class WordlistError(WordbusterError):
    """A wordlist file is missing or unreadable."""


class CsrfError(WordbusterError):
    """The CSRF pre-flight request failed or its pattern did not match."""

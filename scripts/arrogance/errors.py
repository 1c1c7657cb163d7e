"""Exception types raised by the gateway and fetch commands."""


class ArroganceError(Exception):
    """Base class for all dashboard errors."""


class CredentialError(ArroganceError):
    """Service account file missing, unreadable or malformed."""


class InitError(ArroganceError):
    """Gateway could not be initialized at startup."""


class FetchError(ArroganceError):
    """A fetch command failed. Scoped to a single panel."""


class AuthError(FetchError):
    """Authentication service call failed."""


class StoreError(FetchError):
    """Document store call failed."""


class DecodeError(FetchError):
    """A single fetched item could not be decoded."""

"""
Domain exceptions - Semantic error types raised across port boundaries.

Flow outcomes are reported as result enums (see ports.py). These
exceptions only travel from adapters back into the service, which
translates them into results.
"""


class AccountError(Exception):
    """Base class for account domain errors."""

    pass


class EmailAlreadyRegistered(AccountError):
    """The store's uniqueness constraint rejected an email."""

    pass


class NotificationError(AccountError):
    """Verification code could not be delivered."""

    pass

"""Error taxonomy shared by services and endpoints."""

from __future__ import annotations


class ValidationFailed(ValueError):
    """A precondition on user input failed before touching the store.

    ``key`` is a message key in ``locales/<lang>/messages.json``; endpoints
    translate it with the request language.
    """

    def __init__(self, key: str, **params: object) -> None:
        super().__init__(key)
        self.key = key
        self.params = params


class NotFound(ValidationFailed):
    """The referenced record does not exist."""


class SaleRejected(ValueError):
    """The atomic sale operation refused the sale; message is shown verbatim."""


class LoadError(RuntimeError):
    """A snapshot fetch failed; carries the first failing request's message."""


class StoreNotConfigured(RuntimeError):
    """Raised by write paths when no record store is configured."""

"""Exceptions raised while resolving account statuses.

Each exception maps to one HTTP outcome; the handlers live in
``fedistatus.main``.
"""


class FediStatusError(Exception):
    """Base class for errors raised by the status resolution core."""


class CursorNotFound(FediStatusError):
    """``max_id`` does not name any stored outbox entry."""

    def __init__(self, max_id: str):
        super().__init__(f"no outbox entry for object {max_id}")
        self.max_id = max_id


class RemoteResolutionFailure(FediStatusError):
    """WebFinger did not yield an actor link for a remote account."""

    def __init__(self, acct: str):
        super().__init__(f"could not resolve remote account {acct}")
        self.acct = acct


class StorageError(FediStatusError):
    """A storage query failed; terminal for the request."""

"""
Exception hierarchy for group_patcher.

Transport failures are not wrapped: googleapiclient.errors.HttpError (and the
underlying httplib2 / socket errors) reach the caller unchanged.
"""


class GroupPatcherError(Exception):
    """Base class for all exceptions raised by group_patcher."""


class ConfigError(GroupPatcherError):
    """The OAuth client secrets file (or other user input) is missing or malformed."""

    def __init__(self, message: str, path: str = "") -> None:
        self.message = message
        self.path = path
        super().__init__(message)


class AuthExchangeError(GroupPatcherError):
    """The authorization code was not supplied or was rejected by the token endpoint."""

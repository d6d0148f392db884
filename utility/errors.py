"""
Exceptions raised by the renamer helpers.

Only StorageError, DirectoryError and IdentityUnavailable are meant to escape a
command; the global app command error handler in bot.py turns them into a
generic reply. Everything else (missing config, bad nickname, no permission)
is answered directly by the command.
"""


class RenamerError(Exception):
    """Base class for all renamer errors."""


class StorageError(RenamerError):
    """Reading or writing the role configuration database failed."""


class EncodingError(RenamerError):
    """A role name could not be encoded for storage."""


class DirectoryError(RenamerError):
    """The Discord API refused or failed a role/member request."""


class IdentityUnavailable(RenamerError):
    """The invoking user could not be resolved as a member of the guild."""

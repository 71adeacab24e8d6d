"""Errors raised by the table engine.

All of them are caller-input failures: they are raised before the engine
mutates anything, so a rejected request leaves the table as it was.
"""


class TableError(ValueError):
    """Base class for rejected table requests."""


class IllegalActionError(TableError):
    pass


class IllegalAmountError(TableError):
    pass


class OutOfCardsError(TableError):
    pass

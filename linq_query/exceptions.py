"""
Fault kinds introduced by the query pipeline itself.

Faults are never raised by pipeline operators: a fresh instance is created and
carried by the resulting Queryable, and terminal operators hand it back as the
second item of their (value, fault) result. Faults coming from user callbacks
are carried verbatim and need not derive from these classes.
"""


class LinqException(Exception):
    default_message = "linq: pipeline fault"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class LinqNilInputException(LinqException):
    default_message = "linq: None input passed to from_collection"


class LinqNilFuncException(LinqException):
    default_message = "linq: passed evaluation function is None"


class LinqNoElementException(LinqException):
    default_message = "linq: element satisfying the conditions does not exist"


class LinqNegativeParamException(LinqException):
    default_message = "linq: parameter cannot be negative"


class LinqUnsupportedTypeException(LinqException):
    default_message = "linq: sorting this type with order() is not supported, use order_by()"

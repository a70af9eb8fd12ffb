"""Error classes and helpers"""

__all__ = ["ParseError", "ArityError", "UnitError", "BuildError"]


class ParseError(Exception):
    """Exception raised when a tree description cannot be compiled.

    There is no partial result; any ParseError aborts the compile.

    Args:
        message: (str) Error description
        token: (str | None) Text of the offending token
        line: (int | None) 1-indexed line of the offending token
        column: (int | None) 1-indexed column of the offending token
        filename: (str | None) Name of the source, for messages
        context: (str | None) Source excerpt with a caret under the error

    Attributes:
        message: (str) Error description
        token: (str | None) Text of the offending token
        line: (int | None) Line where the error occurred
        column: (int | None) Column where the error occurred
    """

    def __init__(self, message, token=None, line=None, column=None,
                 filename=None, context=None):
        self.message = message
        self.token = token
        self.line = line
        self.column = column
        self.filename = filename
        self.context = context
        super().__init__(message)

    def __str__(self):
        where = self.filename or "<text>"
        if self.line:
            where = f"{where}:{self.line}:{self.column}"
        return f"{where}: {self.message}"


class ArityError(ParseError):
    """Shorthand invoked with an unsupported number of arguments."""


class UnitError(ValueError):
    """Length requested with an unknown unit suffix or keyword."""


class BuildError(Exception):
    """Error while executing a compiled program against a host.

    Only errors owned by the executor use this class. Exceptions raised by
    the host or by evaluating host expressions propagate unchanged.

    Args:
        message: (str) Error description
        position: (SourcePosition | None) Source of the failing operation
    """

    def __init__(self, message, position=None):
        self.message = message
        self.position = position
        if position is not None and position.start_line:
            message = f"{message} ({position})"
        super().__init__(message)

class LispError(Exception):
    """ Base class for all lispwalk errors"""
    pass

class LispSyntaxError(LispError):
    """ Raised by the reader on malformed source"""

    def __init__(self, message: str, position: int | None = None, incomplete: bool = False):
        if position is not None:
            message = f"{message} (at offset {position})"
        super().__init__(message)
        self.position = position
        # True when more input could still complete the form (open paren or string)
        self.incomplete = incomplete

class LispInvalidSymbol(LispError):
    """ Raised when something other than a symbol is used as a name"""
    pass

class LispUnboundSymbol(LispError):
    """ Raised when a symbol is used before it is bound"""
    pass

class LispArityError(LispError):
    """ Raised when the number of arguments passed to a procedure or form is incorrect"""

class LispTypeError(LispError):
    """ Raised when the types of arguments passed to a procedure are incorrect"""

class LispZeroDivisionError(LispError):
    """ Raised on division by zero"""

class LispImportError(LispError):
    """ Raised when a Python module cannot be imported into the environment"""

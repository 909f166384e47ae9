
class QuasiError(Exception):
    """ Base class for all quasi errors"""
    pass

class UnboundSymbolError(QuasiError):
    """ Raised when no scope in the environment chain binds a symbol"""
    pass

class MissingArgumentError(QuasiError):
    """ Raised when a parameter the caller never supplied is captured or forced"""

class RecursivePromiseError(QuasiError):
    """ Raised when a promise is forced again while it is being forced"""

class MarkerContextError(QuasiError):
    """ Raised when an escape marker appears where it cannot be resolved"""

class SpliceContextError(MarkerContextError):
    """ Raised when unquote-splice is used where only a single expression is allowed"""

class DefineNameError(QuasiError):
    """ Raised when the name side of a define marker is not a string"""

class QuasiTypeError(QuasiError):
    """ Raised when a value has the wrong type for an operation"""

class SpliceTypeError(QuasiTypeError):
    """ Raised when unquote-splice evaluates to something that is not a sequence"""

class NotCallableError(QuasiTypeError):
    """ Raised when the head of a call does not evaluate to a function"""

class ArityError(QuasiError):
    """ Raised when the arguments of a call do not match the function's formals"""

class ResolutionDepthError(QuasiError):
    """ Raised when a tree is nested deeper than the configured resolution limit"""

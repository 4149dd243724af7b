class KeelError(Exception):
    """ Base class for all keel errors"""
    pass

class ConfigurationError(KeelError):
    """ Raised when an alias request names an action with no registered handler"""
    pass

class NamespaceNameError(KeelError, ValueError):
    """ Raised when a namespace name is not a dotted path of identifiers"""

class NamespaceNotFoundError(KeelError, LookupError):
    """ Raised when a namespace is neither registered nor found on the search path"""

class InvalidSymbolError(KeelError):
    """ Raised when a definition or local binding uses an invalid name"""

class UnboundSymbolError(KeelError, NameError):
    """ Raised when a symbol is used before it is bound"""

class KeelSyntaxError(KeelError, SyntaxError):
    """ Raised when the reader cannot parse source text"""

class ArityError(KeelError, TypeError):
    """ Raised when the number of arguments passed to a function is incorrect"""

class KeelTypeError(KeelError, TypeError):
    """ Raised when a form or argument has the wrong type"""

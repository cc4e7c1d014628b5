from enum import Enum


class ErrorKind(Enum):
    SYNTAX_ERROR = 'SyntaxError'
    UNKNOWN_IDENTIFIER = 'UnknownIdentifier'
    UNKNOWN_ATTRIBUTE = 'UnknownAttribute'
    TYPE_MISMATCH = 'TypeMismatch'
    DIVISION_BY_ZERO = 'DivisionByZero'
    RANGE_ERROR = 'RangeError'
    DUPLICATE_ATTRIBUTE_NAME = 'DuplicateAttributeName'
    UNRECOGNIZED_DIRECTIVE = 'UnrecognizedDirective'
    UNRESOLVED_COMPOSITE_REFERENCE = 'UnresolvedCompositeReference'
    MULTIPLE_SERVICE_MARKERS = 'MultipleServiceMarkers'
    INVALID_TYPE = 'InvalidType'
    INVALID_DIRECTIVE = 'InvalidDirective'


class DSDLError(Exception):
    kind = None  # type: ErrorKind

    def __init__(self, message, line=None, column=None):
        Exception.__init__(self, message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self):
        if self.line is None:
            return self.message
        return '%d:%d: %s' % (self.line, self.column or 1, self.message)


class DSDLSyntaxError(DSDLError):
    kind = ErrorKind.SYNTAX_ERROR


class UnknownIdentifierError(DSDLError):
    kind = ErrorKind.UNKNOWN_IDENTIFIER

    def __init__(self, identifier, line=None, column=None):
        DSDLError.__init__(self, 'unknown identifier %r' % identifier, line, column)
        self.identifier = identifier


class UnknownAttributeError(DSDLError):
    kind = ErrorKind.UNKNOWN_ATTRIBUTE


class TypeMismatchError(DSDLError):
    kind = ErrorKind.TYPE_MISMATCH


class DivisionByZeroError(DSDLError):
    kind = ErrorKind.DIVISION_BY_ZERO


class RangeError(DSDLError):
    kind = ErrorKind.RANGE_ERROR


class DuplicateAttributeNameError(DSDLError):
    kind = ErrorKind.DUPLICATE_ATTRIBUTE_NAME


class UnrecognizedDirectiveError(DSDLError):
    kind = ErrorKind.UNRECOGNIZED_DIRECTIVE


class UnresolvedCompositeReferenceError(DSDLError):
    kind = ErrorKind.UNRESOLVED_COMPOSITE_REFERENCE


class MultipleServiceMarkersError(DSDLError):
    kind = ErrorKind.MULTIPLE_SERVICE_MARKERS


class InvalidTypeError(DSDLError):
    kind = ErrorKind.INVALID_TYPE


class InvalidDirectiveError(DSDLError):
    kind = ErrorKind.INVALID_DIRECTIVE


class DefinitionError(Exception):
    """Raised in strict mode by the first diagnostic with error severity."""

    def __init__(self, diagnostic):
        Exception.__init__(self, str(diagnostic))
        self.diagnostic = diagnostic

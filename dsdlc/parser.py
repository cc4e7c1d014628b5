import functools
import logging
import re
from fractions import Fraction

from lark import Lark, Transformer
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from dsdlc.error import DSDLSyntaxError
from dsdlc.grammar import GRAMMAR
from dsdlc.objects import *


_logger = logging.getLogger(__name__)

_PRIMITIVE_NAME = re.compile(r'(u?int|float)([0-9]+)$')

# Words the lexer gives a meaning of their own; never valid as attribute names.
_RESERVED_NAME = re.compile(r'(true|false|saturated|truncated|bool|byte|utf8|u?int[0-9]+|float[0-9]+|void[0-9]+)$')

_LINE_BREAK = re.compile(r'\r\n|\r|\n')

_ESCAPES = {
    '\\': '\\',
    "'": "'",
    '"': '"',
    'n': '\n',
    'r': '\r',
    't': '\t',
}


class DSDLTransformer(Transformer):
    """Builds statement and expression objects while the LALR parser reduces a line."""

    def line(self, args):
        return args[0] if args else None

    def directive(self, args):
        name = str(args[0])
        expression = args[1] if len(args) > 1 else None
        return Directive(name, expression)

    def service_response_marker(self, args):
        return ServiceResponseMarker()

    def constant(self, args):
        dtype, name, expression = args
        return Constant(dtype, _attribute_name(name), expression)

    def field(self, args):
        dtype, name = args
        return Field(dtype, _attribute_name(name))

    def padding_field(self, args):
        return PaddingField(self.void_from_token(args[0]))

    def type_array(self, args):
        element, (kind, length) = args
        return ArrayType(element, kind, length)

    def capacity_inclusive(self, args):
        return ArrayKind.VARIABLE_INCLUSIVE, args[0]

    def capacity_exclusive(self, args):
        return ArrayKind.VARIABLE_EXCLUSIVE, args[0]

    def capacity_fixed(self, args):
        return ArrayKind.FIXED, args[0]

    def type_versioned(self, args):
        components = str(args[0]).split('.')
        *namespace, name, major, minor = components
        return VersionedType(tuple(namespace), name, int(major), int(minor))

    def type_primitive(self, args):
        cast_mode = None
        if len(args) == 2:
            cast_mode = CastMode(str(args.pop(0)))

        name = str(args[0])
        if name == 'bool':
            return PrimitiveType(PrimitiveKind.BOOLEAN, 1, cast_mode)
        if name == 'byte':
            return PrimitiveType(PrimitiveKind.BYTE, 8, cast_mode)
        if name == 'utf8':
            return PrimitiveType(PrimitiveKind.UTF8, 8, cast_mode)

        prefix, bit_length = _PRIMITIVE_NAME.match(name).groups()
        return PrimitiveType(PrimitiveKind(prefix), int(bit_length), cast_mode)

    def type_void(self, args):
        return self.void_from_token(args[0])

    @staticmethod
    def void_from_token(token):
        return VoidType(int(str(token)[len('void'):]))

    # Expressions

    def binary(self, args):
        lhs, operator, rhs = args
        return BinaryOperation(operator, lhs, rhs)

    def unary(self, args):
        operator, operand = args
        return UnaryOperation(operator, operand)

    def power(self, args):
        lhs, rhs = args
        return BinaryOperation('**', lhs, rhs)

    def attribute(self, args):
        operand, name = args
        return AttributeAccess(operand, str(name))

    def parenthesized(self, args):
        return Parenthesized(args[0])

    def type_reference(self, args):
        return TypeReference(args[0])

    def identifier(self, args):
        return Identifier(str(args[0]))

    def op_log(self, args):
        return str(args[0])

    op_cmp = op_bit = op_add = op_mul = op_unary = op_log

    def set(self, args):
        return SetLiteral(tuple(args))

    def real(self, args):
        return RealLiteral(Fraction(str(args[0]).replace('_', '')))

    def integer(self, args):
        text = str(args[0]).replace('_', '')
        radix = {'b': 2, 'o': 8, 'x': 16}.get(text[1:2].lower(), 10)
        return IntegerLiteral(int(text) if radix == 10 else int(text[2:], radix), radix)

    def string(self, args):
        return StringLiteral(unescape_string(str(args[0])))

    def boolean(self, args):
        return BooleanLiteral(str(args[0]) == 'true')


def _attribute_name(token) -> str:
    name = str(token)
    if _RESERVED_NAME.match(name):
        raise DSDLSyntaxError('%r is a reserved word and cannot name an attribute' % name)
    return name


def unescape_string(literal: str) -> str:
    body = literal[1:-1]
    out = []
    i = 0
    while i < len(body):
        c = body[i]
        if c != '\\':
            out.append(c)
            i += 1
            continue

        escape = body[i + 1]
        if escape in _ESCAPES:
            out.append(_ESCAPES[escape])
            i += 2
        elif escape in 'uU':
            width = 4 if escape == 'u' else 8
            digits = body[i + 2:i + 2 + width]
            if len(digits) != width or not all(d in '0123456789abcdefABCDEF' for d in digits):
                raise DSDLSyntaxError('invalid escape sequence %r' % body[i:i + 2 + width])
            out.append(chr(int(digits, 16)))
            i += 2 + width
        else:
            raise DSDLSyntaxError('invalid escape sequence %r' % body[i:i + 2])

    return ''.join(out)


@functools.lru_cache(maxsize=None)
def _get_parser() -> Lark:
    # The transformer holds no state, so one compiled parser serves every call.
    return Lark(GRAMMAR, start='line', parser='lalr', lexer='contextual', transformer=DSDLTransformer())


def _at_end(error: UnexpectedInput) -> bool:
    return isinstance(error, UnexpectedEOF) or (isinstance(error, UnexpectedToken) and error.token.type == '$END')


def _error_column(error: UnexpectedInput, text: str) -> int:
    if _at_end(error) or not isinstance(error.column, int) or error.column < 1:
        return len(text.rstrip()) + 1
    return error.column


def _describe(error: UnexpectedInput) -> str:
    if isinstance(error, UnexpectedCharacters):
        return 'unexpected character %r' % error.char
    if _at_end(error):
        return 'unexpected end of line'
    if isinstance(error, UnexpectedToken):
        return 'unexpected %r' % str(error.token)
    return 'invalid syntax'


def parse_line(text: str, line: int = 1):
    """
    Parses one line of a definition.

    Returns the statement found on the line, or None for blank and comment-only lines.
    Raises DSDLSyntaxError positioned at the offending column.
    """
    indent = len(text) - len(text.lstrip())
    try:
        statement = _get_parser().parse(text)
    except UnexpectedInput as e:
        raise DSDLSyntaxError(_describe(e), line, _error_column(e, text)) from None
    except VisitError as e:
        # Raised from a transformer callback, e.g. for a malformed string escape.
        raise DSDLSyntaxError(str(e.orig_exc), line, indent + 1) from None
    except DSDLSyntaxError as e:
        raise DSDLSyntaxError(e.message, line, indent + 1) from None

    if statement is not None:
        statement.line = line
        statement.column = indent + 1

    return statement


def parse(data: str, diagnostics=None) -> Definition:
    """
    Parses the text of one definition line by line.

    Without a diagnostics collector the first syntax error propagates. With one,
    the error is collected and parsing resumes on the next line.
    """
    definition = Definition()

    lines = _LINE_BREAK.split(data)
    if lines[-1] == '':
        lines.pop()

    for number, text in enumerate(lines, start=1):
        try:
            statement = parse_line(text, number)
        except DSDLSyntaxError as e:
            if diagnostics is None:
                raise
            _logger.debug('Syntax error on line %d: %s', number, e.message)
            diagnostics.error(e)
            continue

        if statement is not None:
            definition.statements.append(statement)

    _logger.debug('Parsed %d statements', len(definition.statements))
    return definition

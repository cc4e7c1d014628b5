"""
Compile-time evaluation of DSDL expressions.

All numbers are exact rationals. Operands of every operator are evaluated before
the operator is applied, logical operators included.
"""
import logging
import operator
from fractions import Fraction

from dsdlc.error import DivisionByZeroError, RangeError, TypeMismatchError, UnknownAttributeError
from dsdlc.objects import *
from dsdlc.schema import DefinitionKind, ResolvedComposite
from dsdlc.values import Boolean, Rational, Set, String, TypeValue, Value


_logger = logging.getLogger(__name__)


ARITHMETIC_OPERATORS = ('+', '-', '*', '/', '%', '**')
BITWISE_OPERATORS = ('|', '^', '&')

# Upper bound on the magnitude of a power, in bits of numerator or denominator.
MAX_POWER_BITS = 1 << 16


def evaluate(expression: Expression, scope) -> Value:
    if isinstance(expression, IntegerLiteral):
        return Rational(Fraction(expression.value))

    if isinstance(expression, RealLiteral):
        return Rational(expression.value)

    if isinstance(expression, StringLiteral):
        return String(expression.value)

    if isinstance(expression, BooleanLiteral):
        return Boolean(expression.value)

    if isinstance(expression, SetLiteral):
        return Set.of(evaluate(e, scope) for e in expression.elements)

    if isinstance(expression, Parenthesized):
        return evaluate(expression.inner, scope)

    if isinstance(expression, Identifier):
        return scope.lookup_identifier(expression.name)

    if isinstance(expression, TypeReference):
        return TypeValue(scope.resolve_type(expression.dtype))

    if isinstance(expression, UnaryOperation):
        return apply_unary(expression.operator, evaluate(expression.operand, scope))

    if isinstance(expression, BinaryOperation):
        lhs = evaluate(expression.lhs, scope)
        rhs = evaluate(expression.rhs, scope)
        return apply_binary(expression.operator, lhs, rhs)

    if isinstance(expression, AttributeAccess):
        return get_attribute(evaluate(expression.operand, scope), expression.attribute)

    raise TypeError('not an expression: %r' % (expression,))


def apply_unary(op: str, operand: Value) -> Value:
    if op == '!':
        if isinstance(operand, Boolean):
            return Boolean(not operand.value)
    elif op == '-':
        if isinstance(operand, Rational):
            return Rational(-operand.value)
    elif op == '+':
        if isinstance(operand, Rational):
            return operand
    else:
        raise ValueError('unknown unary operator %r' % op)

    raise TypeMismatchError("can't apply unary %s to a %s" % (op, operand.type_name))


def _divide(lhs, rhs):
    if rhs == 0:
        raise DivisionByZeroError('division by zero')
    return lhs / rhs


def _modulo(lhs, rhs):
    if rhs == 0:
        raise DivisionByZeroError('modulo by zero')
    return lhs % rhs


def _power(base, exponent):
    if exponent.denominator != 1:
        raise TypeMismatchError('exponent %s is not an integer, the result would not be rational' % exponent)
    if base == 0 and exponent < 0:
        raise DivisionByZeroError('zero raised to a negative power')
    width = max(base.numerator.bit_length(), base.denominator.bit_length())
    if width > 1 and (width - 1) * abs(exponent.numerator) > MAX_POWER_BITS:
        raise RangeError('%s ** %s exceeds %d bits' % (base, exponent, MAX_POWER_BITS))
    return base ** exponent.numerator


def _integer_operator(function):
    def apply(lhs, rhs):
        if lhs.denominator != 1 or rhs.denominator != 1:
            raise TypeMismatchError('bitwise operators require integer operands')
        return Fraction(function(lhs.numerator, rhs.numerator))
    return apply


_RATIONAL_ARITHMETIC = {
    '+': operator.add,
    '-': operator.sub,
    '*': operator.mul,
    '/': _divide,
    '%': _modulo,
    '**': _power,
    '|': _integer_operator(operator.or_),
    '^': _integer_operator(operator.xor),
    '&': _integer_operator(operator.and_),
}

_ORDERING = {
    '==': operator.eq,
    '!=': operator.ne,
    '<=': operator.le,
    '>=': operator.ge,
    '<': operator.lt,
    '>': operator.gt,
}

_BOOLEAN_OPERATORS = {
    '||': operator.or_,
    '&&': operator.and_,
    '==': operator.eq,
    '!=': operator.ne,
}


def _mismatch(op, lhs, rhs):
    return TypeMismatchError("can't apply %s to %s and %s" % (op, lhs.type_name, rhs.type_name))


def apply_binary(op: str, lhs: Value, rhs: Value) -> Value:
    if isinstance(lhs, Set) or isinstance(rhs, Set):
        return _apply_set(op, lhs, rhs)

    if type(lhs) is not type(rhs):
        raise _mismatch(op, lhs, rhs)

    if isinstance(lhs, Rational):
        if op in _RATIONAL_ARITHMETIC:
            return Rational(_RATIONAL_ARITHMETIC[op](lhs.value, rhs.value))
        if op in _ORDERING:
            return Boolean(_ORDERING[op](lhs.value, rhs.value))

    elif isinstance(lhs, Boolean):
        if op in _BOOLEAN_OPERATORS:
            return Boolean(_BOOLEAN_OPERATORS[op](lhs.value, rhs.value))

    elif isinstance(lhs, String):
        if op == '+':
            return String(lhs.value + rhs.value)
        if op in ('==', '!='):
            return Boolean(_ORDERING[op](lhs.value, rhs.value))

    elif isinstance(lhs, TypeValue):
        if op in ('==', '!='):
            return Boolean(_ORDERING[op](lhs.type, rhs.type))

    raise _mismatch(op, lhs, rhs)


_SET_OPERATORS = {
    '|': frozenset.union,
    '&': frozenset.intersection,
    '^': frozenset.symmetric_difference,
}


def _apply_set(op, lhs, rhs):
    if isinstance(lhs, Set) and isinstance(rhs, Set):
        if op in _SET_OPERATORS:
            return Set.of(_SET_OPERATORS[op](lhs.elements, rhs.elements))
        if op in _ORDERING:
            # Comparison of sets is inclusion.
            return Boolean(_ORDERING[op](lhs.elements, rhs.elements))
        raise _mismatch(op, lhs, rhs)

    if op not in ARITHMETIC_OPERATORS + BITWISE_OPERATORS:
        raise _mismatch(op, lhs, rhs)

    # Set with scalar: the operator applies to each element.
    if isinstance(lhs, Set):
        return Set.of(apply_binary(op, element, rhs) for element in lhs)
    return Set.of(apply_binary(op, lhs, element) for element in rhs)


def get_attribute(value: Value, attribute: str) -> Value:
    if isinstance(value, Set):
        if attribute in ('min', 'max', 'count'):
            return getattr(value, attribute)
        raise UnknownAttributeError('set has no attribute %r' % attribute)

    if isinstance(value, TypeValue) and isinstance(value.type, ResolvedComposite):
        composite = value.type
        if composite.kind is DefinitionKind.SERVICE:
            raise UnknownAttributeError('type %s has no attributes because it is a service' % composite)
        try:
            return composite.constants[attribute]
        except KeyError:
            raise UnknownAttributeError('type %s has no attribute %r' % (composite, attribute)) from None

    raise UnknownAttributeError('%s %s has no attribute %r' % (value.type_name, value, attribute))

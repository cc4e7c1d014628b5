import logging

from dsdlc.error import InvalidTypeError, RangeError, TypeMismatchError, UnresolvedCompositeReferenceError
from dsdlc.evaluator import evaluate
from dsdlc.objects import *
from dsdlc.schema import ResolvedArray, ResolvedComposite
from dsdlc.values import Rational


_logger = logging.getLogger(__name__)

MAX_BIT_LENGTH = 64
FLOAT_BIT_LENGTHS = (16, 32, 64)


def resolve(dtype: DType, scope):
    """
    Turns a type reference into its resolved form.

    Primitive and void types are validated and returned as they are. Array bounds are
    evaluated in `scope`, composite references go through the scope's type lookup.
    """
    if isinstance(dtype, PrimitiveType):
        return resolve_primitive(dtype)

    if isinstance(dtype, VoidType):
        if not 1 <= dtype.bit_length <= MAX_BIT_LENGTH:
            raise InvalidTypeError('invalid void bit length %d' % dtype.bit_length)
        return dtype

    if isinstance(dtype, VersionedType):
        return resolve_versioned(dtype, scope)

    if isinstance(dtype, ArrayType):
        return resolve_array(dtype, scope)

    raise TypeError('not a type: %r' % (dtype,))


def resolve_primitive(dtype: PrimitiveType) -> PrimitiveType:
    kind, bits, cast_mode = dtype.kind, dtype.bit_length, dtype.cast_mode

    if kind is PrimitiveKind.UNSIGNED_INTEGER:
        valid = 1 <= bits <= MAX_BIT_LENGTH
    elif kind is PrimitiveKind.SIGNED_INTEGER:
        valid = 2 <= bits <= MAX_BIT_LENGTH
    elif kind is PrimitiveKind.FLOAT:
        valid = bits in FLOAT_BIT_LENGTHS
    else:
        valid = True

    if not valid:
        raise InvalidTypeError('invalid bit length for %s' % dtype)

    if cast_mode is CastMode.TRUNCATED and kind in (PrimitiveKind.BOOLEAN, PrimitiveKind.SIGNED_INTEGER):
        raise InvalidTypeError('%s can only be saturated' % dtype)

    if cast_mode is not None and kind in (PrimitiveKind.UTF8, PrimitiveKind.BYTE):
        raise InvalidTypeError('%s does not take a cast mode' % kind.value)

    return dtype


def resolve_versioned(dtype: VersionedType, scope) -> ResolvedComposite:
    # A short reference names a type in the definition's own namespace.
    namespace = dtype.namespace or tuple(scope.namespace)
    lookup = scope.type_lookup

    result = None
    if lookup is not None:
        result = lookup.lookup(namespace, dtype.name, dtype.major, dtype.minor)

    if result is None:
        raise UnresolvedCompositeReferenceError('unresolved composite type %s' % '.'.join(
            namespace + (dtype.name, str(dtype.major), str(dtype.minor))))

    return ResolvedComposite(namespace, dtype.name, dtype.major, dtype.minor,
                             result.kind, tuple(result.bit_length_range), dict(result.constants))


def resolve_array(dtype: ArrayType, scope) -> ResolvedArray:
    element = resolve(dtype.element, scope)

    if isinstance(element, VoidType):
        raise InvalidTypeError('void types cannot be array elements')

    length = evaluate(dtype.length, scope)
    if not isinstance(length, Rational):
        raise TypeMismatchError('array length must be a rational, not a %s' % length.type_name)
    if not length.is_integer:
        raise TypeMismatchError('array length %s is not an integer' % length)
    n = length.as_integer()

    if dtype.kind is ArrayKind.FIXED:
        if isinstance(element, PrimitiveType) and element.kind is PrimitiveKind.UTF8:
            raise InvalidTypeError('utf8 arrays must be variable-length')
        if n < 1:
            raise RangeError('fixed array length must be positive, got %d' % n)
        capacity = n
    elif dtype.kind is ArrayKind.VARIABLE_INCLUSIVE:
        capacity = n
    else:
        capacity = n - 1

    if capacity < 0:
        raise RangeError('array capacity must not be negative, got %d' % capacity)

    _logger.debug('Resolved array of %s, %s %d', element, dtype.kind.value, capacity)
    return ResolvedArray(element, dtype.kind, capacity)

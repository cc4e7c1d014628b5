from enum import Enum
from fractions import Fraction

from dataclasses import dataclass, field
from dataslots import dataslots
from typing import List, Optional, Tuple, Union


class CastMode(Enum):
    SATURATED = 'saturated'
    TRUNCATED = 'truncated'


class PrimitiveKind(Enum):
    BOOLEAN = 'bool'
    UNSIGNED_INTEGER = 'uint'
    SIGNED_INTEGER = 'int'
    FLOAT = 'float'
    UTF8 = 'utf8'
    BYTE = 'byte'

    @property
    def is_integer(self):
        return self in (PrimitiveKind.UNSIGNED_INTEGER, PrimitiveKind.SIGNED_INTEGER,
                        PrimitiveKind.UTF8, PrimitiveKind.BYTE)


class ArrayKind(Enum):
    FIXED = 'fixed'
    VARIABLE_INCLUSIVE = 'variable_inclusive'
    VARIABLE_EXCLUSIVE = 'variable_exclusive'


# Float domains, exact.
FLOAT_MAXIMUMS = {
    16: Fraction(2 ** 16 - 2 ** 5),
    32: Fraction(2 ** 128 - 2 ** 104),
    64: Fraction(2 ** 1024 - 2 ** 971),
}


@dataslots
@dataclass(frozen=True)
class PrimitiveType:
    kind: PrimitiveKind
    bit_length: int
    # None means the source did not spell a cast mode.
    cast_mode: Optional[CastMode] = None

    def value_range(self) -> Tuple[Fraction, Fraction]:
        if self.kind is PrimitiveKind.SIGNED_INTEGER:
            half = 2 ** (self.bit_length - 1)
            return Fraction(-half), Fraction(half - 1)
        if self.kind is PrimitiveKind.FLOAT:
            maximum = FLOAT_MAXIMUMS[self.bit_length]
            return -maximum, maximum
        return Fraction(0), Fraction(2 ** self.bit_length - 1)

    def __str__(self):
        if self.kind in (PrimitiveKind.BOOLEAN, PrimitiveKind.UTF8, PrimitiveKind.BYTE):
            name = self.kind.value
        else:
            name = '%s%d' % (self.kind.value, self.bit_length)
        if self.cast_mode is None:
            return name
        return '%s %s' % (self.cast_mode.value, name)


@dataslots
@dataclass(frozen=True)
class VoidType:
    bit_length: int

    def __str__(self):
        return 'void%d' % self.bit_length


@dataslots
@dataclass(frozen=True)
class VersionedType:
    namespace: Tuple[str, ...]
    name: str
    major: int
    minor: int

    def __str__(self):
        return '.'.join(self.namespace + (self.name, str(self.major), str(self.minor)))


ScalarType = Union[PrimitiveType, VoidType, VersionedType]


@dataslots
@dataclass(frozen=True)
class ArrayType:
    element: ScalarType
    kind: ArrayKind
    length: 'Expression'


DType = Union[ScalarType, ArrayType]


# Expressions


@dataslots
@dataclass(frozen=True)
class IntegerLiteral:
    value: int
    radix: int = 10


@dataslots
@dataclass(frozen=True)
class RealLiteral:
    value: Fraction


@dataslots
@dataclass(frozen=True)
class StringLiteral:
    value: str


@dataslots
@dataclass(frozen=True)
class BooleanLiteral:
    value: bool


@dataslots
@dataclass(frozen=True)
class SetLiteral:
    elements: Tuple['Expression', ...] = ()


@dataslots
@dataclass(frozen=True)
class UnaryOperation:
    operator: str
    operand: 'Expression'


@dataslots
@dataclass(frozen=True)
class BinaryOperation:
    operator: str
    lhs: 'Expression'
    rhs: 'Expression'


@dataslots
@dataclass(frozen=True)
class AttributeAccess:
    operand: 'Expression'
    attribute: str


@dataslots
@dataclass(frozen=True)
class Parenthesized:
    inner: 'Expression'


@dataslots
@dataclass(frozen=True)
class TypeReference:
    dtype: DType


@dataslots
@dataclass(frozen=True)
class Identifier:
    name: str


Expression = Union[IntegerLiteral, RealLiteral, StringLiteral, BooleanLiteral, SetLiteral,
                   UnaryOperation, BinaryOperation, AttributeAccess, Parenthesized, TypeReference, Identifier]


# Statements. Positions are filled in by the parser once the line is known.


@dataslots
@dataclass
class Directive:
    name: str
    expression: Optional[Expression] = None
    line: int = 0
    column: int = 0


@dataslots
@dataclass
class ServiceResponseMarker:
    line: int = 0
    column: int = 0


@dataslots
@dataclass
class Constant:
    dtype: DType
    name: str
    expression: Expression
    line: int = 0
    column: int = 0


@dataslots
@dataclass
class Field:
    dtype: DType
    name: str
    line: int = 0
    column: int = 0


@dataslots
@dataclass
class PaddingField:
    void: VoidType
    line: int = 0
    column: int = 0

    @property
    def bit_length(self):
        return self.void.bit_length


Statement = Union[Directive, ServiceResponseMarker, Constant, Field, PaddingField]


@dataslots
@dataclass
class Definition:
    statements: List[Statement] = field(default_factory=list)

    @property
    def service_response_markers(self):
        return [s for s in self.statements if isinstance(s, ServiceResponseMarker)]

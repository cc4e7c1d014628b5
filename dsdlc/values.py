from fractions import Fraction

from dataclasses import dataclass
from dataslots import dataslots
from typing import Any, FrozenSet, Iterable, Union

from dsdlc.error import RangeError, TypeMismatchError


@dataslots
@dataclass(frozen=True)
class Boolean:
    value: bool

    type_name = 'bool'

    def __str__(self):
        return 'true' if self.value else 'false'


@dataslots
@dataclass(frozen=True)
class Rational:
    value: Fraction

    type_name = 'rational'

    @property
    def is_integer(self):
        return self.value.denominator == 1

    def as_integer(self) -> int:
        if not self.is_integer:
            raise TypeMismatchError('%s is not an integer' % self)
        return self.value.numerator

    def __str__(self):
        if self.is_integer:
            return str(self.value.numerator)
        return '%d/%d' % (self.value.numerator, self.value.denominator)


@dataslots
@dataclass(frozen=True)
class String:
    value: str

    type_name = 'string'

    def __str__(self):
        return repr(self.value)


@dataslots
@dataclass(frozen=True)
class Set:
    elements: FrozenSet[Any] = frozenset()

    type_name = 'set'

    @classmethod
    def of(cls, values: Iterable['Value']) -> 'Set':
        elements = frozenset(values)
        kinds = {type(v) for v in elements}
        if len(kinds) > 1:
            raise TypeMismatchError('set elements must share one type, found %s' %
                                    ', '.join(sorted(k.type_name for k in kinds)))
        return cls(elements)

    @property
    def element_type(self):
        for element in self.elements:
            return type(element)
        return None

    def _ordered(self, attribute):
        if not self.elements:
            raise RangeError('an empty set has no %s' % attribute)
        if self.element_type is not Rational:
            raise TypeMismatchError('%s is undefined for a set of %s' % (attribute, self.element_type.type_name))
        return sorted(e.value for e in self.elements)

    @property
    def min(self):
        return Rational(self._ordered('min')[0])

    @property
    def max(self):
        return Rational(self._ordered('max')[-1])

    @property
    def count(self):
        return Rational(Fraction(len(self.elements)))

    def __iter__(self):
        return iter(self.elements)

    def __str__(self):
        items = sorted(self.elements, key=lambda e: e.value if isinstance(e, Rational) else str(e))
        return '{%s}' % ', '.join(str(e) for e in items)


@dataslots
@dataclass(frozen=True)
class TypeValue:
    type: Any

    type_name = 'type'

    def __str__(self):
        return str(self.type)


Value = Union[Boolean, Rational, String, Set, TypeValue]


def rational(value) -> Rational:
    return Rational(Fraction(value))

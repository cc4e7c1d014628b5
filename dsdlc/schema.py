from enum import Enum

from dataclasses import dataclass, field
from dataslots import dataslots
from typing import Any, Dict, List, Optional, Tuple

from dsdlc.objects import ArrayKind, Expression, PrimitiveType, VoidType


class DefinitionKind(Enum):
    MESSAGE = 'message'
    SERVICE = 'service'


class SchemaKind(Enum):
    MESSAGE = 'message'
    SERVICE_REQUEST = 'request'
    SERVICE_RESPONSE = 'response'


@dataslots
@dataclass(frozen=True)
class ResolvedComposite:
    namespace: Tuple[str, ...]
    name: str
    major: int
    minor: int
    kind: DefinitionKind
    bit_length_range: Tuple[int, int]
    constants: Dict[str, Any] = field(default_factory=dict, compare=False, hash=False)

    @property
    def full_name(self):
        return '.'.join(self.namespace + (self.name,))

    def __str__(self):
        return '%s.%d.%d' % (self.full_name, self.major, self.minor)


@dataslots
@dataclass(frozen=True)
class ResolvedArray:
    element: Any
    kind: ArrayKind
    # Exact length for fixed arrays, maximum length otherwise.
    capacity: int

    @property
    def is_fixed(self):
        return self.kind is ArrayKind.FIXED

    def __str__(self):
        if self.is_fixed:
            return '%s[%d]' % (self.element, self.capacity)
        return '%s[<=%d]' % (self.element, self.capacity)


@dataslots
@dataclass(frozen=True)
class FieldAttribute:
    dtype: Any
    name: str

    def __str__(self):
        return '%s %s' % (self.dtype, self.name)


@dataslots
@dataclass(frozen=True)
class ConstantAttribute:
    dtype: PrimitiveType
    name: str
    value: Any

    def __str__(self):
        return '%s %s = %s' % (self.dtype, self.name, self.value)


@dataslots
@dataclass(frozen=True)
class Padding:
    bit_length: int
    # Number of attributes preceding the padding in source order.
    position: int


@dataslots
@dataclass(frozen=True)
class DirectiveTag:
    name: str
    expression: Optional[Expression] = None
    # None when there is no expression or it depends on layout-time identifiers.
    value: Any = None
    line: int = 0


@dataslots
@dataclass
class Schema:
    full_name: str
    version: Tuple[int, int]
    kind: SchemaKind = SchemaKind.MESSAGE
    attributes: List[Any] = field(default_factory=list)
    directives: List[DirectiveTag] = field(default_factory=list)
    padding: List[Padding] = field(default_factory=list)

    @property
    def fields(self) -> List[FieldAttribute]:
        return [a for a in self.attributes if isinstance(a, FieldAttribute)]

    @property
    def constants(self) -> List[ConstantAttribute]:
        return [a for a in self.attributes if isinstance(a, ConstantAttribute)]

    def __getitem__(self, item):
        for attribute in self.attributes:
            if attribute.name == item:
                return attribute
        raise KeyError(item)

    def constant_values(self) -> Dict[str, Any]:
        return {c.name: c.value for c in self.constants}

    def directive(self, name) -> Optional[DirectiveTag]:
        for tag in self.directives:
            if tag.name == name:
                return tag
        return None

    def has_directive(self, name):
        return self.directive(name) is not None

    @property
    def deprecated(self):
        return self.has_directive('deprecated')

    @property
    def sealed(self):
        return self.has_directive('sealed')

    @property
    def union(self):
        return self.has_directive('union')

    @property
    def extent(self):
        tag = self.directive('extent')
        return tag.value if tag is not None else None

    def __str__(self):
        return '%s.%d.%d' % ((self.full_name,) + tuple(self.version))

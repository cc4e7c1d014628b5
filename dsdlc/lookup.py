import logging

from dataclasses import dataclass, field
from dataslots import dataslots
from typing import Dict, Optional, Sequence, Tuple

from dsdlc.schema import DefinitionKind


_logger = logging.getLogger(__name__)


@dataslots
@dataclass(frozen=True)
class LookupResult:
    kind: DefinitionKind
    bit_length_range: Tuple[int, int]
    # Constant name -> Value, for attribute access on the referenced type.
    constants: Dict[str, object] = field(default_factory=dict, compare=False, hash=False)


class TypeLookup(object):
    """
    Read-only access to composite types defined in other sources.

    Implementations must tolerate concurrent lookups; the front end never mutates them.
    """

    def lookup(self, namespace: Sequence[str], name: str, major: int, minor: int) -> Optional[LookupResult]:
        raise NotImplementedError


class StaticTypeLookup(TypeLookup):
    def __init__(self, types=None):
        self._types = {}  # type: Dict[Tuple[Tuple[str, ...], str, int, int], LookupResult]

        for full_name, (major, minor), result in types or ():
            self.add(full_name, major, minor, result)

    def add(self, full_name: str, major: int, minor: int, result: LookupResult):
        *namespace, name = full_name.split('.')
        self._types[(tuple(namespace), name, major, minor)] = result

    def lookup(self, namespace, name, major, minor):
        result = self._types.get((tuple(namespace), name, major, minor))
        if result is None:
            _logger.debug('No type %s.%d.%d', '.'.join(tuple(namespace) + (name,)), major, minor)
        return result

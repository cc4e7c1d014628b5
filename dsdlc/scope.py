from typing import Dict, Optional, Sequence

from dsdlc.error import UnknownIdentifierError
from dsdlc.lookup import TypeLookup
from dsdlc.resolver import resolve


class Scope(object):
    """
    Names visible while resolving one half of a definition.

    Holds the constants declared so far, the definition's namespace for relative
    type references, and the shared read-only type lookup.
    """

    def __init__(self, namespace: Sequence[str] = (), type_lookup: Optional[TypeLookup] = None, constants=None):
        self.namespace = tuple(namespace)
        self.type_lookup = type_lookup
        self.constants = dict(constants or {})  # type: Dict[str, object]

    def lookup_identifier(self, name):
        try:
            return self.constants[name]
        except KeyError:
            raise UnknownIdentifierError(name) from None

    def define(self, name, value):
        self.constants[name] = value

    def resolve_type(self, dtype):
        return resolve(dtype, self)

    def fork(self) -> 'Scope':
        return Scope(self.namespace, self.type_lookup)

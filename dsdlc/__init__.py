from dsdlc.assembler import AssemblyResult, assemble
from dsdlc.config import ParserConfig
from dsdlc.diagnostics import Diagnostic, Diagnostics, Severity
from dsdlc.error import DSDLError, DefinitionError, ErrorKind
from dsdlc.evaluator import evaluate
from dsdlc.frontend import parse_definition
from dsdlc.lookup import LookupResult, StaticTypeLookup, TypeLookup
from dsdlc.parser import parse, parse_line
from dsdlc.resolver import resolve
from dsdlc.schema import DefinitionKind, Schema, SchemaKind
from dsdlc.scope import Scope

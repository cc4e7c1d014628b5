import logging
from fractions import Fraction

from dataclasses import dataclass, field
from dataslots import dataslots
from typing import List, Optional, Tuple

from dsdlc.config import ParserConfig
from dsdlc.diagnostics import Diagnostic, Diagnostics
from dsdlc.error import *
from dsdlc.evaluator import evaluate
from dsdlc.objects import *
from dsdlc.schema import *
from dsdlc.scope import Scope
from dsdlc.values import Boolean, Rational, String


_logger = logging.getLogger(__name__)


# Directive name -> whether an expression is forbidden, required or optional.
NO_EXPRESSION, EXPRESSION_REQUIRED, EXPRESSION_OPTIONAL = range(3)

DIRECTIVES = {
    'deprecated': NO_EXPRESSION,
    'sealed': NO_EXPRESSION,
    'union': NO_EXPRESSION,
    'extent': EXPRESSION_REQUIRED,
    'assert': EXPRESSION_REQUIRED,
    'print': EXPRESSION_OPTIONAL,
}


@dataslots
@dataclass
class AssemblyResult:
    schemas: List[Schema] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self):
        return not any(d.is_error for d in self.diagnostics)

    @property
    def errors(self):
        return [d for d in self.diagnostics if d.is_error]

    @property
    def warnings(self):
        return [d for d in self.diagnostics if not d.is_error]

    @property
    def is_service(self):
        return len(self.schemas) == 2

    def _schema(self, kind):
        for schema in self.schemas:
            if schema.kind is kind:
                return schema
        return None

    @property
    def message(self) -> Optional[Schema]:
        return self._schema(SchemaKind.MESSAGE)

    @property
    def request(self) -> Optional[Schema]:
        return self._schema(SchemaKind.SERVICE_REQUEST)

    @property
    def response(self) -> Optional[Schema]:
        return self._schema(SchemaKind.SERVICE_RESPONSE)


def coerce_constant(dtype: PrimitiveType, value):
    """Checks that a constant's value lies in the domain of its declared type."""
    if dtype.kind is PrimitiveKind.BOOLEAN:
        if not isinstance(value, Boolean):
            raise TypeMismatchError('bool constant initialized with a %s' % value.type_name)
        return value

    if isinstance(value, String) and dtype.kind.is_integer:
        if len(value.value) != 1:
            raise TypeMismatchError('only single-character strings can initialize %s constants' % dtype)
        value = Rational(Fraction(ord(value.value)))

    if not isinstance(value, Rational):
        raise TypeMismatchError('%s constant initialized with a %s' % (dtype, value.type_name))

    if dtype.kind.is_integer and not value.is_integer:
        raise TypeMismatchError('%s constant initialized with non-integer %s' % (dtype, value))

    low, high = dtype.value_range()
    if not low <= value.value <= high:
        raise RangeError('%s is outside the range of %s [%s, %s]' % (value, dtype, Rational(low), Rational(high)))

    return value


class _SchemaBuilder(object):
    def __init__(self, schema: Schema, scope: Scope, config: ParserConfig, diagnostics: Diagnostics):
        self.schema = schema
        self.scope = scope
        self.config = config
        self.diagnostics = diagnostics
        self.names = set()

    def add(self, statement):
        try:
            if isinstance(statement, Constant):
                self.add_constant(statement)
            elif isinstance(statement, Field):
                self.add_field(statement)
            elif isinstance(statement, PaddingField):
                self.add_padding(statement)
            elif isinstance(statement, Directive):
                self.add_directive(statement)
            else:
                raise TypeError('unexpected statement %r' % (statement,))
        except DSDLError as e:
            self.diagnostics.error(e, statement.line, statement.column)

    def claim_name(self, name):
        if name in self.names:
            raise DuplicateAttributeNameError('duplicate attribute name %r' % name)
        self.names.add(name)

    def add_constant(self, statement: Constant):
        self.claim_name(statement.name)

        dtype = self.scope.resolve_type(statement.dtype)
        if not isinstance(dtype, PrimitiveType):
            raise TypeMismatchError('constant %r must have a primitive type, not %s' % (statement.name, dtype))

        value = coerce_constant(dtype, evaluate(statement.expression, self.scope))
        self.scope.define(statement.name, value)
        self.schema.attributes.append(ConstantAttribute(dtype, statement.name, value))
        _logger.debug('Constant %s %s = %s', dtype, statement.name, value)

    def add_field(self, statement: Field):
        self.claim_name(statement.name)

        dtype = self.scope.resolve_type(statement.dtype)
        if isinstance(dtype, VoidType):
            raise InvalidTypeError('padding field %s cannot be named' % dtype)
        if isinstance(dtype, PrimitiveType) and dtype.kind is PrimitiveKind.UTF8:
            raise InvalidTypeError('utf8 can only be used as the element type of a variable-length array')
        element = dtype.element if isinstance(dtype, ResolvedArray) else dtype
        if isinstance(element, ResolvedComposite) and element.kind is DefinitionKind.SERVICE:
            raise InvalidTypeError('service type %s cannot be used as a field type' % element)

        self.schema.attributes.append(FieldAttribute(dtype, statement.name))
        _logger.debug('Field %s %s', dtype, statement.name)

    def add_padding(self, statement: PaddingField):
        void = self.scope.resolve_type(statement.void)
        self.schema.padding.append(Padding(void.bit_length, len(self.schema.attributes)))

    def add_directive(self, statement: Directive):
        name = statement.name
        arity = DIRECTIVES.get(name)

        if arity is None:
            self.diagnostics.error(UnrecognizedDirectiveError('unrecognized directive @%s' % name),
                                   statement.line, statement.column,
                                   severity=self.config.unrecognized_directive_severity)
            return

        if arity == NO_EXPRESSION and statement.expression is not None:
            raise InvalidDirectiveError('@%s does not take an expression' % name)
        if arity == EXPRESSION_REQUIRED and statement.expression is None:
            raise InvalidDirectiveError('@%s requires an expression' % name)

        value = None
        if statement.expression is not None:
            try:
                value = evaluate(statement.expression, self.scope)
            except UnknownIdentifierError as e:
                if e.identifier not in self.config.deferred_identifiers:
                    raise
                _logger.debug('@%s on line %d left for the layout stage', name, statement.line)

        if name == 'extent' and value is not None and not isinstance(value, Rational):
            raise TypeMismatchError('@extent requires a rational, not a %s' % value.type_name)

        if name == 'print' and self.config.print_handler is not None:
            self.config.print_handler(statement.line, '' if value is None else str(value))

        self.schema.directives.append(DirectiveTag(name, statement.expression, value, statement.line))


def assemble(definition: Definition, full_name: str, version: Tuple[int, int], type_lookup=None,
             config: Optional[ParserConfig] = None, diagnostics: Optional[Diagnostics] = None) -> AssemblyResult:
    """
    Builds the schema of a message, or the request and response schemas of a service.

    Problems are reported as diagnostics; assembly carries on past them, except for a
    second service response marker, which leaves no schema at all.
    """
    config = config or ParserConfig()
    if diagnostics is None:
        diagnostics = Diagnostics(strict=config.strict)

    markers = definition.service_response_markers
    if len(markers) > 1:
        marker = markers[1]
        diagnostics.clear()
        diagnostics.error(MultipleServiceMarkersError('a definition can have at most one service response marker'),
                          marker.line, marker.column)
        return AssemblyResult([], diagnostics.finish())

    namespace = tuple(full_name.split('.')[:-1])
    scope = Scope(namespace, type_lookup)
    kind = SchemaKind.SERVICE_REQUEST if markers else SchemaKind.MESSAGE
    builder = _SchemaBuilder(Schema(full_name, tuple(version), kind), scope, config, diagnostics)
    schemas = [builder.schema]

    for statement in definition.statements:
        if isinstance(statement, ServiceResponseMarker):
            # The response starts over with its own names and constants.
            builder = _SchemaBuilder(Schema(full_name, tuple(version), SchemaKind.SERVICE_RESPONSE),
                                     scope.fork(), config, diagnostics)
            schemas.append(builder.schema)
            continue

        builder.add(statement)

    _logger.debug('Assembled %s.%d.%d with %d diagnostics', full_name, version[0], version[1], len(diagnostics))
    return AssemblyResult(schemas, diagnostics.finish())

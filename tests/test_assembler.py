import unittest

from dsdlc.assembler import assemble
from dsdlc.config import ParserConfig
from dsdlc.diagnostics import Severity
from dsdlc.error import DefinitionError, ErrorKind
from dsdlc.frontend import parse_definition
from dsdlc.lookup import LookupResult, StaticTypeLookup
from dsdlc.objects import ArrayKind, PrimitiveKind, PrimitiveType
from dsdlc.parser import parse
from dsdlc.schema import *
from dsdlc.values import Boolean, Rational, rational


def read(text, lookup=None, **options):
    return parse_definition(text, 'uavcan.node.Heartbeat', (1, 0), lookup, ParserConfig(**options))


def kinds(result):
    return [d.kind for d in result.diagnostics]


HEALTH = LookupResult(DefinitionKind.MESSAGE, (2, 2), {'NOMINAL': rational(0), 'WARNING': rational(3)})
GET_INFO = LookupResult(DefinitionKind.SERVICE, (0, 0))


class TestMessages(unittest.TestCase):
    def test_empty_definition(self):
        for text in ('', '\n\n', '# nothing here\n   # at all\n'):
            result = read(text)
            self.assertEqual(result.diagnostics, [])
            self.assertEqual(len(result.schemas), 1)
            self.assertEqual(result.message.attributes, [])
            self.assertFalse(result.is_service)

    def test_schema_identity(self):
        schema = read('uint8 a').message
        self.assertEqual(schema.full_name, 'uavcan.node.Heartbeat')
        self.assertEqual(schema.version, (1, 0))
        self.assertEqual(schema.kind, SchemaKind.MESSAGE)
        self.assertEqual(str(schema), 'uavcan.node.Heartbeat.1.0')

    def test_attributes_in_source_order(self):
        result = read('uint32 uptime\nuint8 MODE = 2\nbool[<=4] flags\nint16 X = -5\n')
        self.assertTrue(result.ok)

        schema = result.message
        self.assertEqual([a.name for a in schema.attributes], ['uptime', 'MODE', 'flags', 'X'])
        self.assertEqual([f.name for f in schema.fields], ['uptime', 'flags'])
        self.assertEqual(schema.constant_values(), {'MODE': rational(2), 'X': rational(-5)})
        self.assertEqual(schema['flags'].dtype,
                         ResolvedArray(PrimitiveType(PrimitiveKind.BOOLEAN, 1), ArrayKind.VARIABLE_INCLUSIVE, 4))

    def test_array_bounds(self):
        schema = read('uint8[<=10] a\nuint8[<10] b\nuint8[10] c').message
        self.assertEqual([f.dtype.capacity for f in schema.fields], [10, 9, 10])
        self.assertFalse(schema['a'].dtype.is_fixed)
        self.assertTrue(schema['c'].dtype.is_fixed)

    def test_constants_in_later_expressions(self):
        schema = read('uint8 N = 4\nuint8[N * 2] data\nuint16 M = N ** 2 + 1').message
        self.assertEqual(schema['data'].dtype.capacity, 8)
        self.assertEqual(schema['M'].value, rational(17))

    def test_padding_is_not_an_attribute(self):
        schema = read('uint8 a\nvoid3\nuint8 b\nvoid5').message
        self.assertEqual([a.name for a in schema.attributes], ['a', 'b'])
        self.assertEqual(schema.padding, [Padding(3, 1), Padding(5, 2)])


class TestConstants(unittest.TestCase):
    def test_uint8_range(self):
        result = read('uint8 X = 300')
        self.assertEqual(kinds(result), [ErrorKind.RANGE_ERROR])
        self.assertEqual(result.diagnostics[0].line, 1)
        self.assertFalse(result.ok)

        result = read('uint8 X = 255')
        self.assertTrue(result.ok)
        self.assertEqual(result.message['X'].value, rational(255))

    def test_signed_and_float_ranges(self):
        self.assertTrue(read('int8 X = -128').ok)
        self.assertEqual(kinds(read('int8 X = -129')), [ErrorKind.RANGE_ERROR])
        self.assertTrue(read('float16 X = 65504').ok)
        self.assertEqual(kinds(read('float16 X = 65505')), [ErrorKind.RANGE_ERROR])
        self.assertEqual(read('float32 PI = 3.14159').message['PI'].value.value.denominator, 100000)

    def test_type_mismatches(self):
        for text in ('bool B = 1', 'uint8 X = true', 'uint8 X = 1.5', 'uint8 X = "ab"', 'uint8[2] X = 1',
                     'uavcan.node.Health.1.0 X = 1'):
            lookup = StaticTypeLookup([('uavcan.node.Health', (1, 0), HEALTH)])
            self.assertEqual(kinds(read(text, lookup)), [ErrorKind.TYPE_MISMATCH], text)

    def test_booleans_and_characters(self):
        schema = read('bool B = true && !false\nuint8 C = \'A\'\nutf8 U = "z"').message
        self.assertEqual(schema['B'].value, Boolean(True))
        self.assertEqual(schema['C'].value, rational(65))
        self.assertEqual(schema['U'].value, rational(122))

    def test_division_by_zero(self):
        self.assertEqual(kinds(read('uint8 X = 1 / 0')), [ErrorKind.DIVISION_BY_ZERO])

    def test_unknown_identifier(self):
        self.assertEqual(kinds(read('uint8 X = Y + 1')), [ErrorKind.UNKNOWN_IDENTIFIER])
        self.assertEqual(kinds(read('uint8 X = _offset_')), [ErrorKind.UNKNOWN_IDENTIFIER])


class TestNames(unittest.TestCase):
    def test_duplicates(self):
        result = read('uint8 a\nuint16 a')
        self.assertEqual(kinds(result), [ErrorKind.DUPLICATE_ATTRIBUTE_NAME])
        self.assertEqual(result.diagnostics[0].line, 2)

        self.assertEqual(kinds(read('uint8 A = 1\nuint8 A')), [ErrorKind.DUPLICATE_ATTRIBUTE_NAME])

    def test_halves_do_not_conflict(self):
        result = read('uint8 a\nuint8 K = 1\n---\nuint8 a\nuint8 K = 2')
        self.assertTrue(result.ok)
        self.assertEqual(result.request['K'].value, rational(1))
        self.assertEqual(result.response['K'].value, rational(2))


class TestServices(unittest.TestCase):
    def test_split(self):
        result = read('uint8 N = 3\nuint8[N] request_data\n---\n@sealed\nbool ok\n')
        self.assertTrue(result.ok)
        self.assertTrue(result.is_service)
        self.assertIsNone(result.message)

        self.assertEqual(result.request.kind, SchemaKind.SERVICE_REQUEST)
        self.assertEqual([a.name for a in result.request.attributes], ['N', 'request_data'])
        self.assertEqual(result.response.kind, SchemaKind.SERVICE_RESPONSE)
        self.assertEqual([a.name for a in result.response.attributes], ['ok'])
        self.assertTrue(result.response.sealed)
        self.assertFalse(result.request.sealed)

    def test_response_does_not_see_request_constants(self):
        result = read('uint8 N = 3\n---\nuint8[N] data')
        self.assertEqual(kinds(result), [ErrorKind.UNKNOWN_IDENTIFIER])

    def test_empty_halves(self):
        result = read('---')
        self.assertTrue(result.ok)
        self.assertEqual(result.request.attributes, [])
        self.assertEqual(result.response.attributes, [])

    def test_multiple_markers_are_fatal(self):
        result = read('uint8 a\nuint8 a\n---\nbool b\n---\nuint8 =\n')
        self.assertEqual(kinds(result), [ErrorKind.MULTIPLE_SERVICE_MARKERS])
        self.assertEqual(result.diagnostics[0].line, 5)
        self.assertEqual(result.schemas, [])
        self.assertFalse(result.ok)


class TestDirectives(unittest.TestCase):
    def test_recognized(self):
        result = read('@deprecated\n@union\nuint8 a\nuint16 b\n@extent 64 * 8\n@assert 1 + 1 == 2\n')
        self.assertTrue(result.ok)

        schema = result.message
        self.assertEqual([t.name for t in schema.directives], ['deprecated', 'union', 'extent', 'assert'])
        self.assertTrue(schema.deprecated)
        self.assertTrue(schema.union)
        self.assertFalse(schema.sealed)
        self.assertEqual(schema.extent, rational(512))
        self.assertEqual(schema.directive('assert').value, Boolean(True))
        self.assertEqual(schema.directive('extent').line, 5)

    def test_assert_is_not_interpreted(self):
        result = read('@assert 1 == 2')
        self.assertTrue(result.ok)
        self.assertEqual(result.message.directive('assert').value, Boolean(False))

    def test_layout_identifiers_are_deferred(self):
        result = read('uint8 a\n@assert _offset_ % 8 == {0}')
        self.assertTrue(result.ok)
        tag = result.message.directive('assert')
        self.assertIsNone(tag.value)
        self.assertIsNotNone(tag.expression)

    def test_arity(self):
        for text in ('@sealed 1', '@extent', '@assert', '@deprecated true'):
            self.assertEqual(kinds(read(text)), [ErrorKind.INVALID_DIRECTIVE], text)
        self.assertEqual(kinds(read('@extent true')), [ErrorKind.TYPE_MISMATCH])

    def test_unrecognized_severity(self):
        result = read('@frobnicate\nuint8 a')
        self.assertEqual(kinds(result), [ErrorKind.UNRECOGNIZED_DIRECTIVE])
        self.assertFalse(result.ok)
        self.assertEqual(result.message.directives, [])

        result = read('@frobnicate 3\nuint8 a', unrecognized_directive_severity=Severity.WARNING)
        self.assertTrue(result.ok)
        self.assertEqual(result.warnings[0].kind, ErrorKind.UNRECOGNIZED_DIRECTIVE)
        self.assertEqual(result.warnings[0].severity, Severity.WARNING)

    def test_print(self):
        printed = []
        read('uint8 N = 7\n@print N * 2\n@print\n@print "done"',
             print_handler=lambda line, text: printed.append((line, text)))
        self.assertEqual(printed, [(2, '14'), (3, ''), (4, "'done'")])


class TestFields(unittest.TestCase):
    def test_composites(self):
        lookup = StaticTypeLookup([('uavcan.node.Health', (1, 0), HEALTH),
                                   ('uavcan.node.GetInfo', (1, 0), GET_INFO)])
        result = read('Health.1.0 health\nuint8 LEVEL = Health.1.0.WARNING\nuavcan.node.Health.1.0[<=2] history',
                      lookup)
        self.assertTrue(result.ok)
        self.assertEqual(result.message['health'].dtype.full_name, 'uavcan.node.Health')
        self.assertEqual(result.message['LEVEL'].value, rational(3))

        self.assertEqual(kinds(read('GetInfo.1.0 info', lookup)), [ErrorKind.INVALID_TYPE])
        self.assertEqual(kinds(read('Missing.1.0 m', lookup)), [ErrorKind.UNRESOLVED_COMPOSITE_REFERENCE])

    def test_invalid_fields(self):
        self.assertEqual(kinds(read('void8 reserved')), [ErrorKind.INVALID_TYPE])
        self.assertEqual(kinds(read('utf8 character')), [ErrorKind.INVALID_TYPE])
        self.assertEqual(kinds(read('uint128 wide')), [ErrorKind.INVALID_TYPE])
        self.assertTrue(read('utf8[<=32] name\nbyte[4] raw').ok)


class TestRecovery(unittest.TestCase):
    def test_every_problem_in_one_pass(self):
        result = read('uint8 a\nuint8 X = 300\nuint8 =\nuint8 a\n@bogus\nuint16 b\n')
        self.assertEqual(kinds(result), [ErrorKind.RANGE_ERROR, ErrorKind.SYNTAX_ERROR,
                                         ErrorKind.DUPLICATE_ATTRIBUTE_NAME, ErrorKind.UNRECOGNIZED_DIRECTIVE])
        self.assertEqual([d.line for d in result.diagnostics], [2, 3, 4, 5])
        self.assertEqual([a.name for a in result.message.attributes], ['a', 'b'])

    def test_positions_survive_unusual_separators(self):
        result = read('# part\u2028two\nuint8 X = 300\n')
        self.assertEqual(kinds(result), [ErrorKind.RANGE_ERROR])
        self.assertEqual(result.diagnostics[0].line, 2)

        result = read('@print "a\x0cb"\nuint8 X = 300')
        self.assertEqual(kinds(result), [ErrorKind.RANGE_ERROR])
        self.assertEqual(result.diagnostics[0].line, 2)

    def test_oversized_constant_is_a_diagnostic(self):
        result = read('uint8 X = 2 ** 2 ** 40\nuint8 Y = 1')
        self.assertEqual(kinds(result), [ErrorKind.RANGE_ERROR])
        self.assertEqual(result.message.constant_values(), {'Y': rational(1)})

    def test_reserved_attribute_names(self):
        result = read('uint8 true\nuint8 saturated\nuint8 ok')
        self.assertEqual(kinds(result), [ErrorKind.SYNTAX_ERROR, ErrorKind.SYNTAX_ERROR])
        self.assertEqual([a.name for a in result.message.attributes], ['ok'])

    def test_strict_mode_raises_on_first_error(self):
        with self.assertRaises(DefinitionError) as cm:
            read('uint8 a\nuint8 X = 300\nuint8 Y = 400', strict=True)
        self.assertEqual(cm.exception.diagnostic.kind, ErrorKind.RANGE_ERROR)

        with self.assertRaises(DefinitionError) as cm:
            read('uint8 =\nuint8 X = 300', strict=True)
        self.assertEqual(cm.exception.diagnostic.kind, ErrorKind.SYNTAX_ERROR)

        with self.assertRaises(DefinitionError):
            read('---\n---', strict=True)

    def test_strict_mode_keeps_warnings(self):
        result = read('@custom\nuint8 a', strict=True, unrecognized_directive_severity=Severity.WARNING)
        self.assertTrue(result.ok)
        self.assertEqual(len(result.warnings), 1)

    def test_assemble_parsed_definition(self):
        result = assemble(parse('uint8 a\n---\nuint8 b'), 'demo.Echo', (0, 1))
        self.assertEqual(str(result.request), 'demo.Echo.0.1')
        self.assertEqual(result.response['b'].name, 'b')


if __name__ == '__main__':
    unittest.main()

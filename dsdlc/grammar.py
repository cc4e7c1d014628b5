GRAMMAR = r'''line: statement?

?statement: directive
          | service_response_marker
          | constant
          | field
          | padding_field

directive: "@" NAME expression?
service_response_marker: SERVICE_RESPONSE_MARKER
constant: type NAME "=" expression
field: type NAME
padding_field: VOID_TYPE


?type: type_array | type_scalar

type_array: type_scalar "[" array_capacity "]"
array_capacity: "<=" expression -> capacity_inclusive
              | "<" expression  -> capacity_exclusive
              | expression      -> capacity_fixed

?type_scalar: type_versioned | type_primitive | type_void

type_versioned: VERSIONED_TYPE
type_primitive: CAST_MODE? PRIMITIVE_NAME
type_void: VOID_TYPE


?expression: ex_logical

?ex_logical: ex_comparison
           | ex_logical op_log ex_comparison -> binary
?ex_comparison: ex_bitwise
              | ex_comparison op_cmp ex_bitwise -> binary
?ex_bitwise: ex_additive
           | ex_bitwise op_bit ex_additive -> binary
?ex_additive: ex_multiplicative
            | ex_additive op_add ex_multiplicative -> binary
?ex_multiplicative: ex_inversion
                  | ex_multiplicative op_mul ex_inversion -> binary
?ex_inversion: ex_exponential
             | op_unary ex_inversion -> unary
?ex_exponential: ex_attribute
               | ex_attribute "**" ex_inversion -> power
?ex_attribute: ex_atom
             | ex_attribute "." NAME -> attribute
?ex_atom: "(" expression ")" -> parenthesized
        | type -> type_reference
        | literal
        | NAME -> identifier

!op_log: "||" | "&&"
!op_cmp: "==" | "!=" | "<=" | ">=" | "<" | ">"
!op_bit: "|" | "^" | "&"
!op_add: "+" | "-"
!op_mul: "*" | "/" | "%"
!op_unary: "!" | "+" | "-"

?literal: set
        | REAL    -> real
        | INTEGER -> integer
        | STRING  -> string
        | BOOLEAN -> boolean

set: "{" (expression ("," expression)*)? "}"


// Priorities encode the ordered choice: versioned names before keywords
// before plain identifiers, real literals before integer literals.

VERSIONED_TYPE.4: /[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*\.[0-9]+\.[0-9]+/
CAST_MODE.3: /(saturated|truncated)(?![A-Za-z0-9_])/
PRIMITIVE_NAME.3: /(bool|byte|utf8|uint[1-9][0-9]*|int[1-9][0-9]*|float[1-9][0-9]*)(?![A-Za-z0-9_])/
VOID_TYPE.3: /void[1-9][0-9]*(?![A-Za-z0-9_])/
BOOLEAN.3: /(true|false)(?![A-Za-z0-9_])/
NAME: /[A-Za-z_][A-Za-z0-9_]*/

SERVICE_RESPONSE_MARKER.3: /---+/

REAL.2: /((([0-9](_?[0-9])*)?\.[0-9](_?[0-9])*|[0-9](_?[0-9])*\.)([eE][+-]?[0-9](_?[0-9])*)?|[0-9](_?[0-9])*[eE][+-]?[0-9](_?[0-9])*)/
INTEGER.1: /0[bB](_?[01])+|0[oO](_?[0-7])+|0[xX](_?[0-9A-Fa-f])+|[1-9](_?[0-9])*|0(_?0)*/

STRING: /"(\\.|[^"\\])*"|'(\\.|[^'\\])*'/


%ignore COMMENT
COMMENT: /#[^\n]*/

%ignore WHITESPACE
WHITESPACE: /[ \t]+/
'''

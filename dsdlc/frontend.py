import logging

from typing import Optional, Tuple

from dsdlc.assembler import AssemblyResult, assemble
from dsdlc.config import ParserConfig
from dsdlc.diagnostics import Diagnostics
from dsdlc.lookup import TypeLookup
from dsdlc.parser import parse


_logger = logging.getLogger(__name__)


def parse_definition(data: str, full_name: str, version: Tuple[int, int], lookup: Optional[TypeLookup] = None,
                     config: Optional[ParserConfig] = None) -> AssemblyResult:
    """
    Parses and assembles the text of one definition.

    `full_name` is the dotted name of the definition, namespace included, and
    `version` its (major, minor) pair; neither is derived from the text.

    In lenient mode (the default) the result carries every diagnostic found next to
    whatever schemas could be assembled. In strict mode the first error raises
    DefinitionError.
    """
    config = config or ParserConfig()
    diagnostics = Diagnostics(strict=config.strict)

    _logger.debug('Parsing %s.%d.%d', full_name, version[0], version[1])
    definition = parse(data, diagnostics)
    return assemble(definition, full_name, version, lookup, config, diagnostics)

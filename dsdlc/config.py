import logging

from dataclasses import dataclass
from dataslots import dataslots
from typing import Callable, FrozenSet, Optional

from dsdlc.diagnostics import Severity


_logger = logging.getLogger(__name__)

# Identifiers only the layout stage can bind.
LAYOUT_IDENTIFIERS = frozenset({'_offset_'})


def log_print_directive(line: int, text: str):
    _logger.info('@print at line %d: %s', line, text)


@dataslots
@dataclass
class ParserConfig:
    strict: bool = False
    unrecognized_directive_severity: Severity = Severity.ERROR
    print_handler: Optional[Callable[[int, str], None]] = log_print_directive
    deferred_identifiers: FrozenSet[str] = LAYOUT_IDENTIFIERS

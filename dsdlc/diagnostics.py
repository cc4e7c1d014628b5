import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from dataslots import dataslots

from dsdlc.error import DSDLError, DefinitionError, ErrorKind


_logger = logging.getLogger(__name__)


class Severity(Enum):
    ERROR = 'error'
    WARNING = 'warning'


@dataslots
@dataclass(frozen=True)
class Diagnostic:
    severity: Severity
    kind: ErrorKind
    message: str
    line: int = 0
    column: int = 0

    @classmethod
    def from_error(cls, error: DSDLError, line=0, column=0, severity=Severity.ERROR):
        if error.line is not None:
            line, column = error.line, error.column or column
        return cls(severity, error.kind, error.message, line, column)

    @property
    def is_error(self):
        return self.severity is Severity.ERROR

    def __str__(self):
        return '%d:%d: %s: %s [%s]' % (self.line, self.column, self.severity.value, self.message, self.kind.value)


class Diagnostics(object):
    """
    Accumulates diagnostics for one definition.

    In strict mode the first error aborts the pass by raising DefinitionError;
    warnings are always collected.
    """

    def __init__(self, strict=False):
        self.strict = strict
        self._diagnostics = []  # type: List[Diagnostic]

    def collect(self, diagnostic: Diagnostic):
        _logger.debug('%s', diagnostic)
        self._diagnostics.append(diagnostic)
        if self.strict and diagnostic.is_error:
            raise DefinitionError(diagnostic)

    def error(self, error: DSDLError, line=0, column=0, severity: Optional[Severity] = None):
        self.collect(Diagnostic.from_error(error, line, column, severity or Severity.ERROR))

    def clear(self):
        del self._diagnostics[:]

    @property
    def has_errors(self):
        return any(d.is_error for d in self._diagnostics)

    def __len__(self):
        return len(self._diagnostics)

    def finish(self) -> List[Diagnostic]:
        return sorted(self._diagnostics, key=lambda d: (d.line, d.column))

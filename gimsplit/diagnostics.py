'''
Structured events emitted while splitting a file.

The library never prints: whoever drives it passes a listener, that is any
callable accepting a Diagnostic, and decides how to show them.
'''
from enum import Enum, auto


class DiagnosticKind(Enum):
    BAD_MAGIC                = auto()
    WRONG_ROOT_TYPE          = auto()
    UNSUPPORTED_PIXEL_FORMAT = auto()
    INVALID_PALETTE          = auto()
    MISSING_PALETTE          = auto()
    MALFORMED_BLOCK          = auto()
    FILE_INFO                = auto()
    ARTIFACT_WRITTEN         = auto()


class Diagnostic(object):

    def __init__(self, kind: DiagnosticKind, exception=None, **details):
        self.kind = kind
        self.exception = exception
        self.details = details

    def __getattr__(self, name):
        try:
            return self.__dict__['details'][name]
        except KeyError:
            raise AttributeError(name)

    def __repr__(self):
        details = ','.join('%s=%r' % _ for _ in self.details.items())
        return '<%s(%s%s%s)>' % (self.__class__.__name__, self.kind.name, ',' if details else '', details)


class DiagnosticCollector(list):
    '''Listener that keeps all the events it receives.'''

    def __call__(self, diagnostic):
        self.append(diagnostic)

    def of_kind(self, kind):
        return [_ for _ in self if _.kind == kind]


def ignore(diagnostic):
    pass

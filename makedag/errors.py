"""
Exceptions raised while parsing makefiles and building dependency graphs.
"""
import re

_nontab = re.compile(r'[^\t]')

class MakeError(Exception):
    def __init__(self, message, loc=None):
        Exception.__init__(self, message)
        self.message = message
        self.loc = loc

    def __str__(self):
        locstr = ''
        if self.loc is not None:
            locstr = "%s: " % (self.loc,)

        return "%s%s" % (locstr, self.message)

class SyntaxError(MakeError):
    pass

class ParseError(SyntaxError):
    """
    The grammar did not match at some offset.

    Outer parsers attach the name of the construct they were parsing as the
    error passes through them, so `contexts` reads from the innermost failure
    outward.
    """

    MISMATCH = 0
    EMPTY = 1   # an empty match, used to end a repeated list

    def __init__(self, expected, data, offset, kind=MISMATCH):
        self.data = data
        self.offset = offset
        self.expected = expected
        self.kind = kind
        self.contexts = []
        SyntaxError.__init__(self, "expected %s" % (expected,), data.getloc(offset))

    def addcontext(self, name, offset):
        self.contexts.append((name, self.data.getloc(offset)))

    def __str__(self):
        s = SyntaxError.__str__(self)
        if self.contexts:
            s += " (in %s)" % ', in '.join(name for name, loc in self.contexts)
        return s

    def render(self):
        """
        Render a multi-line diagnostic: the failure first, then every construct
        that was being parsed, each with its source line and a caret.
        """
        entries = [("expected %s" % self.expected, self.loc)]
        entries.extend(("in %s" % name, loc) for name, loc in self.contexts)

        out = []
        for i, (what, loc) in enumerate(entries):
            line = self.data.getline(loc.line)
            out.append("%i: at %s, %s:" % (i, loc, what))
            out.append(line)
            out.append(_nontab.sub(' ', line[:loc.column]) + '^')
            out.append('')
        return '\n'.join(out)

class DataError(MakeError):
    pass

class ResolutionError(DataError):
    """
    Raised when the dependencies of a target cannot be resolved.
    """
    pass

class CycleError(ResolutionError):
    def __init__(self, target, prerequisite, cycle, loc=None):
        self.target = target
        self.prerequisite = prerequisite
        self.cycle = cycle
        ResolutionError.__init__(self, "Recursive dependency: %s" % ' -> '.join(cycle), loc)

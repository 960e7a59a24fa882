"""
Functionality for parsing Makefile syntax.

Makefiles are parsed with a small recursive-descent parser. Every parse
function has the same calling convention:

    parse_something(d, offset) -> (value, newoffset)

where `d` is a basic.Data holding the whole makefile. A function that does not
match raises errors.ParseError and consumes nothing, since offsets are plain
values owned by the caller. Composite parsers attach the name of the construct
they were parsing to errors passing through them, so that a failure deep
inside a rule can be reported with the whole chain of expectations.

The top level tries, at each position, a blank line, a comment, a variable
assignment and a rule, in that order. The first to match wins. If none does,
the error from the rule attempt is reported: rules are the most permissive
construct, so their failure is the most informative.

Lines are joined by a trailing backslash in two places only: variable values
(one value fragment per physical line, backslash kept) and prerequisite lists
(the backslash and newline are dropped). Recipe lines are stored one per
physical line, without their leading indentation.
"""

import logging, re

from makedag.basic import Data
from makedag.data import Assignment, Variable, Rule, Makefile
from makedag.errors import ParseError

_pars_log = logging.getLogger('makedag.parser')

"""
Grammar primitives.
"""

_lineending = re.compile(r'\r\n|\n')
# blank lines, including ones holding only spaces and tabs
_blanklines = re.compile(r'(?:[ \t]*(?:\r\n|\n)|[ \t]+\Z)*')
_hspace = re.compile(r'[ \t]*')
_restofline = re.compile(r'[^\r\n]*')

_notvariablename = frozenset(':#=!? \t\r\n')
_nottarget = frozenset('#%:|"<> \t\r\n')

def isvariablename(c):
    """
    A variable name may be any sequence of characters not containing ':', '#',
    '=' or whitespace. '?' and '!' are excluded too because they start
    assignment operators.
    """
    return c not in _notvariablename

def istarget(c):
    """
    Target names may be globs and paths, so wildcards and slashes are allowed.
    """
    return c not in _nottarget

_variablename = re.compile(r'[^:#=!? \t\r\n]+')

# a backslash right before a newline is a continuation, not part of a name
_targetname = re.compile(r'(?:[^#%:|"<> \t\r\n\\]|\\(?!\r?\n))*')

def line_ending(d, offset):
    """
    Match a single "\\r\\n" or "\\n". The end of input is not a line ending.
    """
    m = _lineending.match(d.s, offset)
    if m is None:
        raise ParseError('line ending', d, offset)
    return m.end(0)

def _lineterminator(d, offset):
    # the last line of a file does not need a newline
    if d.atend(offset):
        return offset
    return line_ending(d, offset)

def _skiphspace(d, offset):
    return _hspace.match(d.s, offset).end(0)

def _skipblanklines(d, offset):
    return _blanklines.match(d.s, offset).end(0)

def _context(name, parsefn, d, offset):
    try:
        return parsefn(d, offset)
    except ParseError as e:
        e.addcontext(name, offset)
        raise

"""
Variables.
"""

# longer operators first, ':=' would otherwise never see '::='
_assignmenttokens = ('::=', ':=', '+=', '?=', '!=', '=')

def parse_assignment_op(d, offset):
    for token in _assignmenttokens:
        if d.s.startswith(token, offset):
            return Assignment.fromtoken(token), offset + len(token)

    raise ParseError('assignment operator', d, offset)

def parse_variable_name(d, offset):
    m = _variablename.match(d.s, offset)
    if m is None:
        raise ParseError('variable name', d, offset)
    return m.group(0), m.end(0)

def parse_variable(d, offset):
    startoffset = offset
    name, offset = parse_variable_name(d, offset)
    offset = _skiphspace(d, offset)
    assignment, offset = parse_assignment_op(d, offset)
    offset = _skiphspace(d, offset)

    m = _restofline.match(d.s, offset)
    value = [m.group(0)]
    offset = m.end(0)

    while value[-1].endswith('\\'):
        m = _lineending.match(d.s, offset)
        if m is None:
            break

        offset = _skiphspace(d, m.end(0))
        m = _restofline.match(d.s, offset)
        value.append(m.group(0))
        offset = m.end(0)

    offset = _skipblanklines(d, offset)
    return Variable(name, assignment, value, d.getloc(startoffset)), offset

"""
Comments and blank lines. Neither produces a value.
"""

_comment = re.compile(r'(?:#[^\r\n]*(?:\r\n|\n)*)+')
_blankline = re.compile(r'[ \t]*(?:\r\n|\n)|[ \t]+\Z')

def parse_comment(d, offset):
    m = _comment.match(d.s, offset)
    if m is None:
        raise ParseError('comment', d, offset)
    return None, m.end(0)

def parse_blank_line(d, offset):
    m = _blankline.match(d.s, offset)
    if m is None:
        raise ParseError('blank line', d, offset)
    return None, m.end(0)

"""
Rules.
"""

_prerequisitelead = re.compile(r'(?:[ \t]|\\(?:\r\n|\n))*')
_continuation = re.compile(r'\\(?:\r\n|\n)')
_trailingcomment = re.compile(r'#[^\r\n]*')
_recipeindent = re.compile(r'[ \t]+')

def parse_target(d, offset):
    offset = _skiphspace(d, offset)
    m = _targetname.match(d.s, offset)
    name = m.group(0)
    if not name:
        raise ParseError('target name', d, offset, ParseError.EMPTY)
    return name, _skiphspace(d, m.end(0))

def parse_targets(d, offset):
    targets = []
    while True:
        try:
            name, offset = parse_target(d, offset)
        except ParseError as e:
            if e.kind != ParseError.EMPTY or not targets:
                raise
            break
        targets.append(name)

    return targets, offset

def parse_prerequisite(d, offset):
    offset = _prerequisitelead.match(d.s, offset).end(0)
    m = _targetname.match(d.s, offset)
    name = m.group(0)
    if not name:
        raise ParseError('prerequisite name', d, offset, ParseError.EMPTY)

    offset = _skiphspace(d, m.end(0))
    m = _continuation.match(d.s, offset)
    if m is not None:
        offset = m.end(0)
    return name, offset

def parse_prerequisites(d, offset):
    prerequisites = []
    while True:
        try:
            name, offset = parse_prerequisite(d, offset)
        except ParseError as e:
            if e.kind != ParseError.EMPTY:
                raise
            break
        prerequisites.append(name)

    # a continuation with no prerequisite after it
    offset = _prerequisitelead.match(d.s, offset).end(0)
    return prerequisites, offset

def parse_delimiter(d, offset):
    if not d.s.startswith(':', offset):
        raise ParseError("':'", d, offset)
    return ':', offset + 1

def parse_recipe_line(d, offset):
    m = _recipeindent.match(d.s, offset)
    if m is None:
        raise ParseError('indented recipe line', d, offset)

    m = _restofline.match(d.s, m.end(0))
    offset = _lineterminator(d, m.end(0))
    return m.group(0), _skipblanklines(d, offset)

def parse_recipe(d, offset):
    recipe = []
    while True:
        # lines holding only whitespace are not recipe lines
        offset = _skipblanklines(d, offset)
        if d.atend(offset):
            break
        try:
            line, offset = parse_recipe_line(d, offset)
        except ParseError:
            break
        recipe.append(line)

    return recipe, offset

def _parse_rule(d, offset):
    startoffset = offset
    targets, offset = _context('target', parse_targets, d, offset)
    offset = _skiphspace(d, offset)
    _, offset = _context('delimiter', parse_delimiter, d, offset)
    offset = _skiphspace(d, offset)
    prerequisites, offset = _context('prereqs', parse_prerequisites, d, offset)

    m = _trailingcomment.match(d.s, offset)
    if m is not None:
        offset = m.end(0)

    offset = _lineterminator(d, offset)
    recipe, offset = _context('recipe', parse_recipe, d, offset)
    return Rule(targets, prerequisites, recipe, d.getloc(startoffset)), offset

def parse_rule(d, offset):
    return _context('rule', _parse_rule, d, offset)

"""
The whole makefile.
"""

# (description, parse function, Makefile attribute collecting the value)
_statementparsers = (
    ('blank line', parse_blank_line, None),
    ('comment', parse_comment, None),
    ('variable', parse_variable, 'variables'),
    ('rule', parse_rule, 'rules'),
)

def parse_makefile(d, offset=0):
    makefile = Makefile()

    while not d.atend(offset):
        error = None
        for what, parsefn, collect in _statementparsers:
            try:
                value, newoffset = parsefn(d, offset)
            except ParseError as e:
                error = e
                continue

            _pars_log.debug("%s: %s", d.getloc(offset), what)
            if collect is not None:
                getattr(makefile, collect).append(value)
            offset = newoffset
            break
        else:
            raise error

    return makefile, offset

def parsestring(s, filename):
    """
    Parse a string containing makefile data into a data.Makefile.
    """
    makefile, offset = parse_makefile(Data.fromstring(s, filename))
    _pars_log.debug("%s: %i variables, %i rules", filename, len(makefile.variables), len(makefile.rules))
    return makefile

def parsefile(pathname):
    # newline='' so that "\r\n" line endings reach the parser untranslated
    with open(pathname, newline='') as fh:
        return parsestring(fh.read(), pathname)

"""
A representation of parsed makefile data structures.
"""
from io import StringIO


class Assignment(object):
    """
    The kind of binding made by a variable assignment.
    """

    RECURSIVE = 0
    SIMPLE = 1
    CONDITIONAL = 2
    APPEND = 3
    SHELL = 4

    _bytoken = {
        '=': RECURSIVE,
        ':=': SIMPLE,
        '::=': SIMPLE,
        '?=': CONDITIONAL,
        '+=': APPEND,
        '!=': SHELL,
    }

    _tokens = {
        RECURSIVE: '=',
        SIMPLE: ':=',
        CONDITIONAL: '?=',
        APPEND: '+=',
        SHELL: '!=',
    }

    _names = {
        RECURSIVE: 'recursive',
        SIMPLE: 'simple',
        CONDITIONAL: 'conditional',
        APPEND: 'append',
        SHELL: 'shell',
    }

    @classmethod
    def fromtoken(cls, token):
        return cls._bytoken[token]

    @classmethod
    def totoken(cls, kind):
        return cls._tokens[kind]

    @classmethod
    def name(cls, kind):
        return cls._names[kind]


class Variable(object):
    """
    A variable assignment.

    `value` holds one fragment per physical line. Fragments of a continued
    value keep their trailing backslash; use flatvalue() for the value as make
    would see it.

    Nothing in makedag changes a Variable once it is built, but `value` is a
    plain list, copied from the one passed in.
    """
    __slots__ = ('name', 'assignment', 'value', 'loc')

    def __init__(self, name, assignment, value, loc=None):
        assert len(value) > 0
        self.name = name
        self.assignment = assignment
        self.value = list(value)
        self.loc = loc

    def flatvalue(self):
        parts = []
        for fragment in self.value:
            if fragment.endswith('\\'):
                fragment = fragment[:-1]
            fragment = fragment.strip()
            if fragment:
                parts.append(fragment)
        return ' '.join(parts)

    def dump(self, fd, indent):
        print("%sVariable %s (%s): %r" % (indent, self.name, Assignment.name(self.assignment), self.value), file=fd)

    def to_source(self):
        value = list(self.value)
        # a continuation at the very end would swallow the next line
        if value[-1].endswith('\\'):
            value[-1] = value[-1][:-1]
        return '%s %s %s' % (self.name, Assignment.totoken(self.assignment), '\n'.join(value))

    def __eq__(self, other):
        if not isinstance(other, Variable):
            return False

        return self.name == other.name \
                and self.assignment == other.assignment \
                and self.value == other.value

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return "Variable(%r, %s, %r)" % (self.name, Assignment.name(self.assignment), self.value)


class Rule(object):
    """
    An explicit rule: the targets it makes, what they depend on, and the
    recipe that would make them.

    Like Variable, a Rule keeps its own copies of the lists it is given and
    is never changed after parsing.
    """
    __slots__ = ('targets', 'prerequisites', 'recipe', 'loc')

    def __init__(self, targets, prerequisites, recipe, loc=None):
        assert len(targets) > 0, "a rule needs at least one target"
        self.targets = list(targets)
        self.prerequisites = list(prerequisites)
        self.recipe = list(recipe)
        self.loc = loc

    def dump(self, fd, indent):
        print("%sRule %s: %s" % (indent, ' '.join(self.targets), ' '.join(self.prerequisites)), file=fd)
        for line in self.recipe:
            print("%s  Command %r" % (indent, line), file=fd)

    def to_source(self):
        header = ' '.join(self.targets) + ':'
        if self.prerequisites:
            header += ' ' + ' '.join(self.prerequisites)

        return '\n'.join([header] + ['\t' + line for line in self.recipe])

    def __eq__(self, other):
        if not isinstance(other, Rule):
            return False

        return self.targets == other.targets \
                and self.prerequisites == other.prerequisites \
                and self.recipe == other.recipe

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return "Rule(%r, %r, %r)" % (self.targets, self.prerequisites, self.recipe)


class Makefile(object):
    """
    The result of parsing a makefile: its variables and its rules, each in
    source order.
    """
    __slots__ = ('variables', 'rules')

    def __init__(self, variables=None, rules=None):
        self.variables = list(variables or [])
        self.rules = list(rules or [])

    def dump(self, fd, indent):
        for v in self.variables:
            v.dump(fd, indent)
        for r in self.rules:
            r.dump(fd, indent)

    def to_source(self):
        chunks = [v.to_source() + '\n' for v in self.variables]
        if chunks and self.rules:
            chunks.append('\n')
        chunks.append('\n'.join(r.to_source() + '\n' for r in self.rules))
        return ''.join(chunks)

    def __eq__(self, other):
        if not isinstance(other, Makefile):
            return False

        return self.variables == other.variables and self.rules == other.rules

    def __ne__(self, other):
        return not self.__eq__(other)

    def __str__(self):
        fd = StringIO()
        self.dump(fd, '')
        return fd.getvalue()

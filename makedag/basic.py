"""
Basic type definitions. Do not introduce dependencies to other makedag modules,
or you risk circular dependencies.
"""
import bisect
import re


class Location(object):
    """
    A location within a makefile: path, 1-based line and 0-based column.
    """
    __slots__ = ('path', 'line', 'column')

    def __init__(self, path, line, column):
        self.path = path
        self.line = line
        self.column = column

    def __eq__(self, other):
        if not isinstance(other, Location):
            return False

        return (self.path, self.line, self.column) == (other.path, other.line, other.column)

    def __ne__(self, other):
        return not self.__eq__(other)

    def __repr__(self):
        return "Location(%r, %r, %r)" % (self.path, self.line, self.column)

    def __str__(self):
        return "%s:%s:%s" % (self.path, self.line, self.column)


_newline = re.compile('\n')
class Data(object):
    """
    The complete text of a makefile. Parsers never modify it; they walk it by
    offset and copy out the pieces they keep.
    """

    __slots__ = ('s', 'path', '_linestarts')

    def __init__(self, s, path):
        self.s = s
        self.path = path
        self._linestarts = None

    @staticmethod
    def fromstring(s, path):
        return Data(s, path)

    def __len__(self):
        return len(self.s)

    def atend(self, offset):
        return offset >= len(self.s)

    def _getlinestarts(self):
        if self._linestarts is None:
            self._linestarts = [0] + [m.end(0) for m in _newline.finditer(self.s)]
        return self._linestarts

    def getloc(self, offset):
        assert 0 <= offset <= len(self.s), "offset %i out of range" % offset
        starts = self._getlinestarts()
        i = bisect.bisect_right(starts, offset) - 1
        return Location(self.path, i + 1, offset - starts[i])

    def getline(self, lineno):
        """
        Return the text of a 1-based line, without its line ending.
        """
        starts = self._getlinestarts()
        if lineno < 1 or lineno > len(starts):
            return ''

        start = starts[lineno - 1]
        end = self.s.find('\n', start)
        if end == -1:
            end = len(self.s)
        return self.s[start:end].rstrip('\r')

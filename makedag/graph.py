"""
Dependency graphs built from parsed makefiles.

Nodes are target and prerequisite names; an edge runs from a target to each of
its prerequisites. The graph is kept acyclic at all times: an edge that would
close a cycle is refused before it is added.
"""

import logging

import networkx as nx
import pydot

from makedag import errors

_graph_log = logging.getLogger('makedag.graph')

PHONY = '.PHONY'

# edges carry no information beyond their existence
EDGE_WEIGHT = 1

def _dotid(name):
    # quoted, so that targets named graph, node or edge stay nodes
    return '"%s"' % name.replace('"', '\\"')

class DependencyGraph(object):
    """
    A directed acyclic graph of makefile targets.

    `phony` holds the names listed as prerequisites of .PHONY. Those rules do
    not put anything in the graph, but a phony name that is a node for some
    other reason carries a `phony` node attribute.
    """

    def __init__(self):
        self.graph = nx.DiGraph()
        self.phony = set()

    def addnode(self, name):
        if name not in self.graph:
            self.graph.add_node(name, phony=name in self.phony)
        return name

    def addedge(self, target, prerequisite, loc=None):
        """
        Add an edge target -> prerequisite, creating missing nodes. Raises
        errors.CycleError without touching the edges if the prerequisite
        already depends on the target.
        """
        self.addnode(target)
        self.addnode(prerequisite)

        if self.graph.has_edge(target, prerequisite):
            return

        # only the new edge can close a cycle: look for a way back
        if nx.has_path(self.graph, prerequisite, target):
            path = nx.shortest_path(self.graph, prerequisite, target)
            _graph_log.info("%s: refusing edge %s -> %s", loc, target, prerequisite)
            raise errors.CycleError(target, prerequisite, [target] + path, loc)

        self.graph.add_edge(target, prerequisite, weight=EDGE_WEIGHT)

    def addrules(self, rules):
        """
        Add every rule to the graph. Either all of them go in, or the graph is
        left as it was and the error is raised.
        """
        saved = self.graph.copy(), set(self.phony)
        try:
            for rule in rules:
                self._addrule(rule)
        except errors.CycleError:
            self.graph, self.phony = saved
            raise

    def _addrule(self, rule):
        for target in rule.targets:
            if target == PHONY:
                # the prerequisites of .PHONY are names, not dependencies
                _graph_log.info("%s: not adding phony targets %s", rule.loc, ' '.join(rule.prerequisites))
                self._markphony(rule.prerequisites)
                continue

            self.addnode(target)
            for prerequisite in rule.prerequisites:
                self.addedge(target, prerequisite, rule.loc)

    def _markphony(self, names):
        for name in names:
            self.phony.add(name)
            if name in self.graph:
                self.graph.nodes[name]['phony'] = True

    def __len__(self):
        return self.graph.number_of_nodes()

    def __contains__(self, name):
        return name in self.graph

    def hasnode(self, name):
        return name in self.graph

    def hasedge(self, target, prerequisite):
        return self.graph.has_edge(target, prerequisite)

    def isphony(self, name):
        return name in self.phony

    def nodes(self):
        return list(self.graph.nodes())

    def edges(self):
        return list(self.graph.edges())

    def prerequisites(self, name):
        return list(self.graph.successors(name))

    def buildorder(self):
        """
        Every name, with prerequisites ahead of the targets that need them.
        """
        return list(reversed(list(nx.topological_sort(self.graph))))

    def to_dot(self):
        dot = pydot.Dot('makefile', graph_type='digraph')
        for name, attrs in self.graph.nodes(data=True):
            if attrs.get('phony'):
                dot.add_node(pydot.Node(_dotid(name), style="dashed"))
            else:
                dot.add_node(pydot.Node(_dotid(name)))
        for target, prerequisite in self.graph.edges():
            dot.add_edge(pydot.Edge(_dotid(target), _dotid(prerequisite)))
        return dot.to_string()

def fromrules(rules):
    g = DependencyGraph()
    g.addrules(rules)
    return g

def frommakefile(makefile):
    """
    Build the dependency graph of a data.Makefile. A rule set with a cycle
    raises errors.CycleError and produces no graph.
    """
    return fromrules(makefile.rules)

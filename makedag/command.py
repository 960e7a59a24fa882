"""
makedag command-line handling.

Reads one makefile and prints its dependency graph in DOT format, the parsed
structure, the makefile re-serialised from it, or a build order.
"""

import argparse, logging, sys

from makedag import errors, graph, parser

_log = logging.getLogger('makedag.command')

_printers = ('graph', 'makefile', 'source', 'order')

def _getparser():
    op = argparse.ArgumentParser(prog='makedag',
                                 description="Turn a makefile into its dependency graph.")
    op.add_argument('-f', '--file',
                    dest='makefile', default='Makefile',
                    help="the makefile to read (default: %(default)s)")
    op.add_argument('-p', '--print',
                    dest='output', choices=_printers, default='graph',
                    help="what to print (default: %(default)s)")
    op.add_argument('-d', '--debug',
                    action='store_true', default=False,
                    help="log what the parser and graph builder do")
    return op

def main(args=None, out=None):
    """
    Run makedag and return the exit status.
    """
    if out is None:
        out = sys.stdout

    options = _getparser().parse_args(args)

    if options.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(name)s: %(message)s")

    try:
        makefile = parser.parsefile(options.makefile)
    except errors.ParseError as e:
        print(e.render(), file=sys.stderr)
        return 2
    except IOError as e:
        print("makedag: %s" % (e,), file=sys.stderr)
        return 2

    if options.output == 'makefile':
        out.write(str(makefile))
        return 0
    if options.output == 'source':
        out.write(makefile.to_source())
        return 0

    try:
        g = graph.frommakefile(makefile)
    except errors.CycleError as e:
        print("makedag: %s" % (e,), file=sys.stderr)
        return 2

    _log.debug("%s: %i nodes, %i edges", options.makefile, len(g), len(g.edges()))

    if options.output == 'order':
        for name in g.buildorder():
            print(name, file=out)
    else:
        out.write(g.to_dot())
        out.write('\n')

    return 0

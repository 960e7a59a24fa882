#!/usr/bin/env python

import sys
import makedag.parser

filename = sys.argv[1]
source = None

with open(filename, newline='') as fh:
    source = fh.read()

makefile = makedag.parser.parsestring(source, filename)
print(makefile.to_source(), end='')

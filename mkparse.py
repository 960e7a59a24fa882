#!/usr/bin/env python

import sys
import makedag.parser

for f in sys.argv[1:]:
    print("Parsing %s" % f)
    makefile = makedag.parser.parsefile(f)
    print(makefile)

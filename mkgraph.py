#!/usr/bin/env python

import sys
import makedag.command

sys.exit(makedag.command.main(sys.argv[1:]))

"""
makedag reads makefiles and builds the dependency graph of their rules.
"""

#!/usr/bin/env python3
"""Module entry point for autocompletions package.

Allows running: python -m sqlite_glance.helpers.autocompletions [args]
"""

from sqlite_glance.helpers.autocompletions import main

if __name__ == '__main__':
    raise SystemExit(main())

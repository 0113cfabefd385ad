"""
sqlite-glance completions

Shell completion for the ``sqlite-glance`` command: option flags and the
table/view names stored in the SQLite file named on the command line.
"""

__version__ = "0.1.0"

from sqlite_glance.helpers.autocompletions.resolver import complete

__all__ = [
    "complete",
]

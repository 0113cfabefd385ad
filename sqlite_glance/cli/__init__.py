"""
CLI module for sqlite-glance completions.

Provides the ``sqlite-glance-complete`` console script that shell
registration scripts call to obtain completion candidates.
"""

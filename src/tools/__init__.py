"""External tool capabilities.

This package wraps the converter, partition table inspector, loop mount,
and copy executables behind small protocols the pipeline depends on.
"""

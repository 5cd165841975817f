"""Type aliases for hitset.

This module defines type aliases used throughout the package for clarity
and consistency. The actual data structures are in core.py and instance.py.
"""

SetIndex = int
"""0-based index of a candidate covering set (a line of the coverage file)."""

PathIndex = int
"""0-based index of an element that has to be hit (a path)."""

Cover = list[SetIndex]
"""Set indices whose path lists together hit every path."""

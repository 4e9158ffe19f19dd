"""
Geometry Controllers
====================
Algorithms that act on flattened polygons: slicing by a line, triangulation
and the fragment bookkeeping built on top of them.

Note: These modules are pure Python/NumPy and own no state between calls.
"""

"""Repository layer: stored-procedure calls (MySQL).

Keep functions thin and focused: one procedure per function, no commits,
so services decide the connection scope.
"""
from __future__ import annotations

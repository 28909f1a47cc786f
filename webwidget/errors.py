from __future__ import annotations


class DataAccessError(Exception):
    """Connection, driver or stored-procedure failure. Never raised for a missing row."""

    def __init__(self, procedure: str, cause: Exception):
        self.procedure = procedure
        self.cause = cause
        super().__init__(f"{procedure} failed: {cause}")

"""
Timeledger: multi-tenant weekly timesheet and time-entry backend.
"""

__version__ = "1.0.0"

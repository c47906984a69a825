"""
Civic Triage Engine - lifecycle, voting and triage scoring for civic problem reports.
"""

__version__ = "0.1.0"

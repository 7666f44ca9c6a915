"""
Seminar Hub API - Authorization and multi-tenant data access for the
seminar platform.
"""

__version__ = "0.1.0"

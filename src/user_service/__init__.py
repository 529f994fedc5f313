"""
User service: a small user-management API built around a centralized
exception taxonomy and a single error-translation middleware.
"""

__version__ = "0.1.0"

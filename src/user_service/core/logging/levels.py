# src/user_service/core/logging/levels.py
"""
Custom log levels.

TRACE sits below DEBUG and is used for routine, high-volume events that are
never actionable on their own (e.g. a lookup for a user that does not exist).
Registering the name lets dictConfig and LOG_LEVEL accept "TRACE" like any
stdlib level.
"""

import logging

TRACE = 5

logging.addLevelName(TRACE, "TRACE")

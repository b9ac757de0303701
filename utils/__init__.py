"""
utils package
-------------

Shared helpers for the staffing engine.

Includes the constants loader, the project logger, time/half-day arithmetic and input validation.
"""

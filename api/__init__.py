"""
api — app-level middleware and exception handlers.
"""

"""
Core module - configuration, security, errors and request guards.
"""

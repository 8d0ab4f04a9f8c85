"""
Utility helpers shared by models and services.
"""

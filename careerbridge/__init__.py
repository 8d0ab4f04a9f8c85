"""
CareerBridge
A job board connecting students, employers and administrators.

Architecture:
- MongoDB: users, jobs and applications collections
- Identity: bcrypt accounts + JWT bearer tokens
- Roles: student, employer, admin (fixed at signup)
"""

__version__ = "1.0.0"

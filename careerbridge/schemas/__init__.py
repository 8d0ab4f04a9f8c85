"""
Schemas module - Request/Response schemas for API endpoints.

Difference from models:
- Models: documents as stored in MongoDB (camelCase aliases)
- Schemas: API contract (what client sends/receives, snake_case)
"""

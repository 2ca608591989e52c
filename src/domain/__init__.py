"""
Domain layer for contact form business logic.

This layer contains:
- Data models (type-safe structures)
- Submission validation (ordered field rules)
- Result types (explicit success/failure handling)
"""

"""
Core app - Shared abstractions and utilities.

This app provides the pieces every other app leans on:
- Domain errors translated to HTTP status codes at the API boundary
- Caller identity resolution (CallerMiddleware)
- Parsing helpers for enum path segments and pagination windows
- Timestamp formatting for DTOs
"""

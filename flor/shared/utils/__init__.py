"""
Shared Utilities Package

- Structured logging with JSON formatting and request context
- Error classification, timeouts and retry with exponential backoff
"""

"""
Shared module package.

Contains cross-cutting concerns used across bounded contexts:
- Failure mapping and error handlers
- Trace context and request middleware
- Rate limiting
- Logging configuration
"""

"""
Shared error handling package.

Centralizes failure-to-HTTP mapping so that failures from every layer
are consistently translated into API responses.
"""

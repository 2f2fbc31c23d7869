"""
Domain layer package.

Contains pure business logic: entities, failures, results, pagination
primitives, and port interfaces. This layer has ZERO framework dependencies.
No FastAPI, no SQLAlchemy, no IO.
"""

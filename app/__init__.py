"""
JobBank: Member API for the job-bank platform.

Application package root. This is a modular monolith using
hexagonal architecture (ports & adapters).

Bounded contexts:
    - members: CRUD, offset pagination and cursor pagination of members.

Layers:
    - domain: Entities, failures, Result type, pagination primitives, ports (ABCs).
    - application: Use cases, DTOs, validation.
    - infrastructure: Adapters (SQLAlchemy, cache providers) implementing domain ports.
    - interfaces: FastAPI routers, Pydantic schemas, dependency wiring.
    - shared: Cross-cutting concerns (errors, logging, trace context, rate limiting).
"""

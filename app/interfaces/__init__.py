"""
Interfaces layer package.

Contains FastAPI routers, Pydantic request/response schemas and the
dependency wiring of use cases. No business logic belongs here.
Routes call use cases and turn their Result into a response.
"""

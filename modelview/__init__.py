"""
modelview — generic model-to-REST adapter.

Given any SQLAlchemy mapped class, synthesizes the full set of HTTP CRUD
operations (create, retrieve, list with pagination, full update, partial
update, delete, delete-all) without per-entity boilerplate.

Layers:
    - domain: Descriptors, primary key codec, pagination, merging, ports, errors.
    - application: The CRUD dispatcher use case.
    - infrastructure: SQLAlchemy adapters (introspection, repository, pool).
    - interfaces: FastAPI routers, Pydantic response schemas.
    - shared: Cross-cutting concerns (errors, security, logging).
"""

from modelview.interfaces.model_view import ModelView
from modelview.main import create_app

__all__ = ["ModelView", "create_app"]

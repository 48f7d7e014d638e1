"""
Infrastructure layer package.

Contains the SQLAlchemy adapters: model introspection, the async
repository implementing the storage port, and the connection pool.
"""

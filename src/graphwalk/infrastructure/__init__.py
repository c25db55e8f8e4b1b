"""Infrastructure layer — database engine, table schema, graph handle.

This layer depends on stdlib and third-party libs (SQLAlchemy).
It must never import from services, commands, or output.
"""

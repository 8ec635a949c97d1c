"""
server — WebSocket / REST transport
===================================

Modules
-------
commands
    Pydantic command schemas and :func:`apply_command`.
api
    :func:`create_app` FastAPI application factory.
"""

"""FastAPI integration: app factory, container, middleware and routers."""

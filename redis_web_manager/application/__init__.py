"""
Application Layer

FastAPI application factory, HTTP routes, middleware and request models.
"""

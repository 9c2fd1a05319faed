"""
API module.
Contains the FastAPI application, routes, and authentication.
"""

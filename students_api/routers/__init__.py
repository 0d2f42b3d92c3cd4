"""
FastAPI routers grouped by resource.

Each module exposes an APIRouter that is included by the application factory
in app.py.
"""

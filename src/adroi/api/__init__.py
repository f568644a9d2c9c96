"""
HTTP API (FastAPI)
"""

from .backend import app, configure

__all__ = ['app', 'configure']

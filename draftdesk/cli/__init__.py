"""Command line and full-screen editor interface."""

from .main import app

__all__ = ['app']

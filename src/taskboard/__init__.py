"""
Taskboard: a personal task manager.

The server side is a FastAPI application (``taskboard.main``) over a pluggable
document store. The client side (``taskboard.client``) talks to that API and
derives the filtered view shown to the user.
"""

__version__ = "0.1.0"

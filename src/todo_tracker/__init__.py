"""
Todo Tracker package.

Multi-user todo service: an in-memory record store, the per-user access
policy, the filter/sort query engine and the TodoService that combines
them, exposed over HTTP by the FastAPI application in ``todo_tracker.main``.
"""

__version__ = "0.1.0"

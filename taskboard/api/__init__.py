"""
Task Board API

FastAPI backend for the board UI: task and category CRUD, drag-and-drop
moves and smart task suggestions.
"""

__version__ = "0.1.0"

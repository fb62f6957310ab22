"""
Blog API Backend — Application Package Initializer
==================================================

What: Marks the `blog_api` directory as a Python package.
Why:  Enables module imports like `from blog_api.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend follows the same layered architecture throughout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Blog Service (Resource Handlers)│  ← Input checks, patch building
    ├─────────────────────────────────────┤
    │   Post Gateway (SQL or in-memory)   │  ← Field rules, ids, timestamps
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Faults travel upwards as exceptions: the gateway raises StoreFault
    subclasses, the error mapper turns them into BlogApiError subclasses,
    and the exception handlers in main.py render the JSON envelope.
"""

__version__ = "1.0.0"

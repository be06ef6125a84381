"""Single-user task list: FastAPI + SQLAlchemy service with manual ordering."""

__version__ = "0.1.0"

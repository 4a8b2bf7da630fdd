"""
course_service package tests

The backend logic for the course marketplace lives in
``course_platform.course_platform.course_service``:

- FastAPI application factory (`main.py`)
- SQLAlchemy models, database integration and data access (`models.py`, `db.py`, `store.py`)
- Password hashing, JWT tokens and the register/login flow (`auth.py`)
- Bearer token verification (`access.py`)
- Course purchases and gated videos (`catalog.py`)
- Pydantic schemas (`schemas.py`)
"""

"""Data-access functions: explicit SQLAlchemy queries over users and roles."""

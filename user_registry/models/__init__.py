"""ORM Models — SQLAlchemy mapped classes, one file per table."""

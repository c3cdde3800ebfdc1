from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Common base class for all social graph models."""
    pass

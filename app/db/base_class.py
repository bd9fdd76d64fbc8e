# /classroom-backend/app/db/base_class.py

from sqlalchemy.orm import declarative_base, declared_attr


class _Base:
    """
    Shared declarative base. Table names are derived from the class name
    (lowercased and pluralized) unless a model overrides `__tablename__`.
    """

    @declared_attr
    def __tablename__(cls) -> str:
        return cls.__name__.lower() + "s"


Base = declarative_base(cls=_Base)

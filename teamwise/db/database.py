from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from teamwise.core.config import settings


class Base(DeclarativeBase):
    pass


engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def enum_values(enum_cls) -> list[str]:
    """Persist enum values ('lead') rather than member names ('LEAD')."""
    return [member.value for member in enum_cls]

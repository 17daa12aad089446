from threading import Lock

from sqlalchemy import create_engine, inspect, select
from sqlalchemy.orm import declarative_base, sessionmaker

from vacation_api.core import config


DATABASE_URL = config.DATABASE_URL

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

# Largest value a signed 64-bit INTEGER primary key can hold.
MAX_ROW_ID = 2**63 - 1

_schema_lock = Lock()
_status_schema_checked = False


def is_storable_id(value: int) -> bool:
    return 0 <= value <= MAX_ROW_ID


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_status_schema(bind=None) -> None:
    """Seed ``vacations_status`` with every known status exactly once."""
    global _status_schema_checked

    if _status_schema_checked and bind is None:
        return

    # Imported here so the models can import Base from this module.
    from vacation_api.models.enums import VacationStatus
    from vacation_api.models.vacation import VacationStatusDefinition

    target = bind or engine

    with _schema_lock:
        if _status_schema_checked and bind is None:
            return

        inspector = inspect(target)

        if VacationStatusDefinition.__tablename__ not in inspector.get_table_names():
            return

        with target.begin() as connection:
            existing_ids = set(connection.execute(select(VacationStatusDefinition.id)).scalars())
            missing = [
                {"id": member.value, "status": member.name}
                for member in VacationStatus
                if member.value not in existing_ids
            ]
            if missing:
                connection.execute(VacationStatusDefinition.__table__.insert(), missing)

        if bind is None:
            _status_schema_checked = True

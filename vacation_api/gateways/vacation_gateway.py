"""Persistence operations for vacation requests."""

from datetime import date, datetime

from pydantic import BaseModel
from sqlalchemy.orm import Session

from vacation_api.database import is_storable_id
from vacation_api.models.enums import VacationStatus
from vacation_api.models.user import User
from vacation_api.models.vacation import Vacation, VacationStatusDefinition, utcnow


class VacationResponse(BaseModel):
    id: int
    user_id: int
    date_from: date
    date_to: date
    reason: str
    status_id: int
    status_name: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class VacationWithUserResponse(VacationResponse):
    user_name: str | None = None
    username: str | None = None


class VacationStatusResponse(BaseModel):
    id: int
    status: str

    class Config:
        from_attributes = True


def _row_to_dict(vacation: Vacation, status_name: str | None, **user_fields) -> dict:
    schema = VacationWithUserResponse if user_fields else VacationResponse
    record = schema.model_validate(vacation).model_copy(update={"status_name": status_name, **user_fields})
    return record.model_dump(mode="json")


class VacationGateway:
    def __init__(self, db: Session):
        self.db = db

    def _joined_query(self):
        return (
            self.db.query(Vacation, User.name, User.username, VacationStatusDefinition.status)
            .outerjoin(User, Vacation.user_id == User.id)
            .outerjoin(VacationStatusDefinition, Vacation.status_id == VacationStatusDefinition.id)
        )

    def get_all_vacations(self) -> list[dict]:
        """All requests, pending first, newest first within a status."""
        rows = self._joined_query().order_by(
            Vacation.status_id.desc(),
            Vacation.created_at.desc(),
            Vacation.id.desc(),
        )
        return [
            _row_to_dict(vacation, status_name, user_name=user_name, username=username)
            for vacation, user_name, username, status_name in rows
        ]

    def get_vacations_by_user_id(self, user_id: int) -> list[dict]:
        rows = (
            self.db.query(Vacation, VacationStatusDefinition.status)
            .outerjoin(VacationStatusDefinition, Vacation.status_id == VacationStatusDefinition.id)
            .filter(Vacation.user_id == user_id)
            .order_by(Vacation.created_at.desc(), Vacation.id.desc())
        )
        return [_row_to_dict(vacation, status_name) for vacation, status_name in rows]

    def get_vacation_by_id(self, vacation_id: int) -> dict | None:
        if not is_storable_id(vacation_id):
            return None
        row = self._joined_query().filter(Vacation.id == vacation_id).first()
        if row is None:
            return None
        vacation, user_name, username, status_name = row
        return _row_to_dict(vacation, status_name, user_name=user_name, username=username)

    def vacation_exists(self, vacation_id: int) -> bool:
        if not is_storable_id(vacation_id):
            return False
        return self.db.query(Vacation.id).filter(Vacation.id == vacation_id).first() is not None

    def create_vacation(self, data: dict) -> int:
        now = utcnow()
        vacation = Vacation(
            user_id=int(data["user_id"]),
            date_from=date.fromisoformat(data["date_from"]),
            date_to=date.fromisoformat(data["date_to"]),
            reason=data["reason"],
            status_id=VacationStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        self.db.add(vacation)
        self.db.commit()
        return vacation.id

    def update_vacation_status(self, vacation_id: int, status_id: int) -> bool:
        if not is_storable_id(vacation_id):
            return False
        updated = (
            self.db.query(Vacation)
            .filter(Vacation.id == vacation_id)
            .update(
                {Vacation.status_id: status_id, Vacation.updated_at: utcnow()},
                synchronize_session=False,
            )
        )
        self.db.commit()
        return updated > 0

    def delete_vacation(self, vacation_id: int) -> bool:
        if not is_storable_id(vacation_id):
            return False
        deleted = self.db.query(Vacation).filter(Vacation.id == vacation_id).delete()
        self.db.commit()
        return deleted > 0

    def is_vacation_owner(self, vacation_id: int, user_id: int) -> bool:
        if not is_storable_id(vacation_id):
            return False
        return (
            self.db.query(Vacation.id)
            .filter(Vacation.id == vacation_id, Vacation.user_id == user_id)
            .first()
            is not None
        )

    def get_vacation_status(self, vacation_id: int) -> VacationStatus | None:
        if not is_storable_id(vacation_id):
            return None
        status_id = self.db.query(Vacation.status_id).filter(Vacation.id == vacation_id).scalar()
        return VacationStatus.from_value(status_id) if status_id is not None else None

    def get_all_statuses(self) -> list[dict]:
        statuses = self.db.query(VacationStatusDefinition).order_by(VacationStatusDefinition.id).all()
        return [VacationStatusResponse.model_validate(row).model_dump() for row in statuses]

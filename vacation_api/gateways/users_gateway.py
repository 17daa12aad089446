"""Persistence operations for user accounts."""

from pydantic import BaseModel
from sqlalchemy.orm import Session

from vacation_api.auth.passwords import hash_password
from vacation_api.database import is_storable_id
from vacation_api.models.enums import UserRole
from vacation_api.models.user import User


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    username: str
    employ_code: str | None = None
    roles_id: int

    class Config:
        from_attributes = True


def serialize_user(user: User) -> dict:
    """Public representation of a user; the password hash is never included."""
    return UserResponse.model_validate(user).model_dump()


class UsersGateway:
    def __init__(self, db: Session):
        self.db = db

    def get_all_users(self) -> list[dict]:
        users = self.db.query(User).order_by(User.id).all()
        return [serialize_user(user) for user in users]

    def get_user_by_id(self, user_id: int) -> dict | None:
        if not is_storable_id(user_id):
            return None
        user = self.db.get(User, user_id)
        return serialize_user(user) if user is not None else None

    def user_exists(self, user_id: int) -> bool:
        if not is_storable_id(user_id):
            return False
        return self.db.query(User.id).filter(User.id == user_id).first() is not None

    def create_user(self, data: dict) -> int:
        user = User(
            name=data["name"],
            email=data["email"],
            username=data["username"],
            employ_code=data.get("employ_code"),
            roles_id=int(data.get("roles_id") or UserRole.USER.value),
            password=hash_password(data["password"]),
        )
        self.db.add(user)
        self.db.commit()
        return user.id

    def update_user(self, user_id: int, data: dict) -> bool:
        if not is_storable_id(user_id):
            return False
        user = self.db.get(User, user_id)
        if user is None:
            return False

        user.name = data["name"]
        user.email = data["email"]
        user.username = data["username"]
        if "employ_code" in data:
            user.employ_code = data["employ_code"]
        if data.get("roles_id") is not None:
            user.roles_id = int(data["roles_id"])
        if data.get("password"):
            user.password = hash_password(data["password"])
        self.db.commit()
        return True

    def delete_user(self, user_id: int) -> bool:
        if not is_storable_id(user_id):
            return False
        deleted = self.db.query(User).filter(User.id == user_id).delete()
        self.db.commit()
        return deleted > 0

    def find_by_username(self, username: str) -> User | None:
        """Return the stored row, password hash included, for credential checks."""
        return self.db.query(User).filter(User.username == username).first()

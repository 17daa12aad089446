import os

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-with-at-least-32-bytes')
os.environ.setdefault('BCRYPT_ROUNDS', '4')

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from vacation_api.auth import jwt_handler  # noqa: E402
from vacation_api.database import Base, ensure_status_schema, get_db  # noqa: E402
from vacation_api.main import app  # noqa: E402
from vacation_api.models.enums import UserRole  # noqa: E402
from vacation_api.models.user import User  # noqa: E402
from vacation_api.auth.passwords import hash_password  # noqa: E402


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    ensure_status_schema(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def db_session(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

    def override_get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_db, None)


def _create_user(db, *, username: str, role: UserRole, password: str = 'secret-password') -> User:
    user = User(
        name=username.title(),
        email=f'{username}@example.com',
        username=username,
        employ_code=f'EMP-{username.upper()}',
        roles_id=role.value,
        password=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def admin_user(db_session) -> User:
    return _create_user(db_session, username='admin', role=UserRole.ADMIN)


@pytest.fixture
def regular_user(db_session) -> User:
    return _create_user(db_session, username='alice', role=UserRole.USER)


@pytest.fixture
def other_user(db_session) -> User:
    return _create_user(db_session, username='bob', role=UserRole.USER)


def auth_headers(user: User) -> dict:
    token = jwt_handler.create_access_token(
        {'user_id': user.id, 'username': user.username, 'role_id': user.roles_id}
    )
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(admin_user) -> dict:
    return auth_headers(admin_user)


@pytest.fixture
def user_headers(regular_user) -> dict:
    return auth_headers(regular_user)


@pytest.fixture
def other_headers(other_user) -> dict:
    return auth_headers(other_user)

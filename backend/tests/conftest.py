import itertools
import os
from decimal import Decimal

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("EMAIL_PROVIDER", "dev")
os.environ.setdefault("ENVIRONMENT", "test")

import boto3  # noqa: E402
import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from legal_vault.core.security import create_access_token, get_password_hash  # noqa: E402
from legal_vault.db import models  # noqa: E402
from legal_vault.db.database import Base, get_db  # noqa: E402
from legal_vault.main import app  # noqa: E402
from legal_vault.services.access_control import Actor  # noqa: E402
from legal_vault.services.storage_service import StorageService, get_storage_service  # noqa: E402

DEFAULT_PASSWORD = "password123"
# hashing is slow on purpose; factories share one hash
DEFAULT_PASSWORD_HASH = get_password_hash(DEFAULT_PASSWORD)

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage():
    # presigning is computed locally, no request reaches AWS
    s3 = boto3.client(
        "s3",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    return StorageService(client=s3, bucket="legal-vault-test")


@pytest.fixture
def client(db, storage):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage_service] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make_user(
        role=models.UserRole.staff,
        email=None,
        password=None,
        is_verified=True,
        status=models.UserStatus.active,
        **kwargs,
    ):
        n = next(counter)
        user = models.User(
            email=email or f"user{n}@example.com",
            password_hash=get_password_hash(password) if password else DEFAULT_PASSWORD_HASH,
            first_name=kwargs.pop("first_name", f"User{n}"),
            last_name=kwargs.pop("last_name", "Tester"),
            role=role,
            status=status,
            is_verified=is_verified,
            **kwargs,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_case(db):
    def _make_case(owner=None, fee="1000", allowed_viewers=None, status=models.CaseStatus.processing, **kwargs):
        case = models.Case(
            user_id=owner.id if owner is not None else None,
            fee=Decimal(fee),
            balance=Decimal(fee),
            allowed_viewers=allowed_viewers,
            status=status,
            **kwargs,
        )
        db.add(case)
        db.commit()
        db.refresh(case)
        return case

    return _make_case


@pytest.fixture
def make_document(db):
    def _make_document(case=None, name="Complaint.pdf", doc_type=models.DocumentType.support, **kwargs):
        document = models.Document(
            case_id=case.id if case is not None else None,
            name=name,
            doc_type=doc_type,
            **kwargs,
        )
        db.add(document)
        db.commit()
        db.refresh(document)
        return document

    return _make_document


@pytest.fixture
def make_notification(db):
    def _make_notification(user, title="Heads up", **kwargs):
        notification = models.Notification(user_id=user.id, title=title, **kwargs)
        db.add(notification)
        db.commit()
        db.refresh(notification)
        return notification

    return _make_notification


def auth_headers(user) -> dict:
    token = create_access_token(
        {"sub": str(user.id), "user_id": user.id, "role": user.role.value}
    )
    return {"Authorization": f"Bearer {token}"}


def actor_for(user) -> Actor:
    return Actor.from_user(user)

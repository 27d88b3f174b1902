"""Fixtures shared by the test modules."""

from __future__ import annotations

import pytest
from flask import Flask
from flask_jwt_extended import create_access_token

from app import create_app
from config import TestConfig
from extensions import db
from models.program import Program
from models.student_profile import StudentProfile
from models.university import University
from models.user import User


@pytest.fixture(name="app")
def app_fixture(tmp_path) -> Flask:
    """Fresh application with an in-memory database per test."""

    app = create_app(TestConfig)
    app.config.update(UPLOAD_DIR=str(tmp_path / "uploads"))
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(name="client")
def client_fixture(app: Flask):
    """Provide a test client for issuing requests."""

    return app.test_client()


def make_user(email: str, role: str = "student", full_name: str | None = None,
              phone: str | None = None) -> User:
    user = User(email=email, role=role)
    user.set_password("secret123")
    db.session.add(user)
    db.session.flush()
    db.session.add(StudentProfile(id=user.id, email=email, full_name=full_name, phone=phone))
    db.session.commit()
    return user


def auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(identity=str(user.id), additional_claims={"roles": [user.role]})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(name="student")
def student_fixture(app) -> User:
    return make_user("amina@example.com", full_name="Amina Rahman Khan", phone="+8801711000000")


@pytest.fixture(name="other_student")
def other_student_fixture(app) -> User:
    return make_user("ben@example.com", full_name="Ben Ode")


@pytest.fixture(name="admin")
def admin_fixture(app) -> User:
    return make_user("admin@example.com", role="admin")


@pytest.fixture(name="student_headers")
def student_headers_fixture(student) -> dict[str, str]:
    return auth_headers(student)


@pytest.fixture(name="admin_headers")
def admin_headers_fixture(admin) -> dict[str, str]:
    return auth_headers(admin)


@pytest.fixture(name="university")
def university_fixture(app) -> University:
    uni = University(name="University of Leeds", country="United Kingdom", city="Leeds")
    uni.programs.append(Program(name="MSc Data Science", degree_type="Master"))
    db.session.add(uni)
    db.session.commit()
    return uni


@pytest.fixture(name="program")
def program_fixture(university) -> Program:
    return university.programs[0]


@pytest.fixture(name="inactive_university")
def inactive_university_fixture(app) -> University:
    uni = University(name="Closed College", country="Ireland", city="Cork", status="inactive")
    uni.programs.append(Program(name="BA History", degree_type="Bachelor"))
    db.session.add(uni)
    db.session.commit()
    return uni

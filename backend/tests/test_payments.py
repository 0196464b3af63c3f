"""Payments and case balance"""
from decimal import Decimal

import pytest

from conftest import actor_for, auth_headers
from legal_vault.db.models import PaymentType, UserRole
from legal_vault.db.schemas import PaymentCreate
from legal_vault.services.payment_service import PaymentService
from legal_vault.utils.exceptions import NotFoundError, ValidationError


def test_payment_lowers_balance_and_delete_restores_it(db, make_user, make_case):
    lawyer = make_user(role=UserRole.lawyer)
    case = make_case(owner=lawyer, fee="5000")
    service = PaymentService(db)

    payment = service.add(
        PaymentCreate(case_id=case.id, amount=1500, payment_type=PaymentType.cash), actor_for(lawyer)
    )
    db.refresh(case)
    assert case.balance == Decimal("3500")
    assert case.fee == Decimal("5000")

    service.delete(payment.id)
    db.refresh(case)
    assert case.balance == Decimal("5000")


def test_cheque_needs_name_and_number(db, make_user, make_case):
    lawyer = make_user(role=UserRole.lawyer)
    case = make_case(owner=lawyer)

    with pytest.raises(ValidationError):
        PaymentService(db).add(
            PaymentCreate(case_id=case.id, amount=100, payment_type=PaymentType.cheque, cheque_name="BDO"),
            actor_for(lawyer),
        )


def test_payment_on_missing_case(db, make_user):
    with pytest.raises(NotFoundError):
        PaymentService(db).add(
            PaymentCreate(case_id=404, amount=100, payment_type=PaymentType.cash), actor_for(make_user())
        )


def test_delete_missing_payment(db):
    with pytest.raises(NotFoundError):
        PaymentService(db).delete(404)


def test_payment_endpoints(client, make_user, make_case):
    lawyer = make_user(role=UserRole.lawyer)
    case = make_case(owner=lawyer, fee="2000")
    headers = auth_headers(lawyer)

    response = client.post(
        "/api/v1/payments/",
        json={"case_id": case.id, "amount": 0, "payment_type": "Cash"},
        headers=headers,
    )
    assert response.status_code == 400

    response = client.post(
        "/api/v1/payments/",
        json={
            "case_id": case.id,
            "amount": 750.5,
            "payment_type": "Cheque",
            "cheque_name": "Metrobank",
            "cheque_number": "000123",
        },
        headers=headers,
    )
    assert response.status_code == 201

    response = client.get(f"/api/v1/cases/{case.id}", headers=headers)
    assert response.json()["balance"] == 1249.5

    response = client.get(f"/api/v1/payments/case/{case.id}", headers=headers)
    assert [p["amount"] for p in response.json()] == [750.5]

"""
Payment endpoints
"""
from fastapi import APIRouter, Depends, status
from typing import List

from legal_vault.api.v1.deps import (
    get_case_service,
    get_current_actor,
    get_payment_service,
    require_admin,
    require_admin_or_lawyer,
)
from legal_vault.db.schemas import MessageResponse, PaymentCreate, PaymentResponse
from legal_vault.services.access_control import Actor, ensure_case_visible, ensure_self_or_admin
from legal_vault.services.case_service import CaseService
from legal_vault.services.payment_service import PaymentService

router = APIRouter()


@router.get("/", response_model=List[PaymentResponse])
def list_payments(
    _: Actor = Depends(require_admin),
    payments: PaymentService = Depends(get_payment_service),
):
    return payments.list()


@router.get("/case/{case_id}", response_model=List[PaymentResponse])
def list_case_payments(
    case_id: int,
    actor: Actor = Depends(get_current_actor),
    cases: CaseService = Depends(get_case_service),
    payments: PaymentService = Depends(get_payment_service),
):
    ensure_case_visible(actor, cases.get(case_id))
    return payments.by_case(case_id)


@router.get("/lawyer/{user_id}", response_model=List[PaymentResponse])
def list_lawyer_payments(
    user_id: int,
    actor: Actor = Depends(get_current_actor),
    payments: PaymentService = Depends(get_payment_service),
):
    ensure_self_or_admin(actor, user_id)
    return payments.by_lawyer(user_id)


@router.post("/", response_model=PaymentResponse, status_code=status.HTTP_201_CREATED)
def add_payment(
    body: PaymentCreate,
    actor: Actor = Depends(require_admin_or_lawyer),
    cases: CaseService = Depends(get_case_service),
    payments: PaymentService = Depends(get_payment_service),
):
    ensure_case_visible(actor, cases.get(body.case_id))
    return payments.add(body, actor)


@router.delete("/{payment_id}", response_model=MessageResponse)
def delete_payment(
    payment_id: int,
    _: Actor = Depends(require_admin),
    payments: PaymentService = Depends(get_payment_service),
):
    payments.delete(payment_id)
    return {"message": f"Payment {payment_id} deleted"}

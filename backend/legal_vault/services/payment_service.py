"""
Payments against a case

A payment lowers the case balance; deleting it gives the amount back. The
payment row and the balance move in the same transaction.
"""
from decimal import Decimal
from typing import List

from legal_vault.core.logger import logger
from legal_vault.db.models import Case, Payment, PaymentType
from legal_vault.db.schemas import PaymentCreate
from legal_vault.services.access_control import Actor
from legal_vault.services.base import BaseService
from legal_vault.utils.exceptions import NotFoundError, ValidationError


class PaymentService(BaseService):

    def get(self, payment_id: int) -> Payment:
        payment = self.db.get(Payment, payment_id)
        if not payment:
            raise NotFoundError("Payment", payment_id)
        return payment

    def list(self) -> List[Payment]:
        return self.db.query(Payment).order_by(Payment.payment_date.desc(), Payment.id.desc()).all()

    def by_case(self, case_id: int) -> List[Payment]:
        return (
            self.db.query(Payment)
            .filter(Payment.case_id == case_id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .all()
        )

    def by_lawyer(self, user_id: int) -> List[Payment]:
        return (
            self.db.query(Payment)
            .join(Case, Payment.case_id == Case.id)
            .filter(Case.user_id == user_id)
            .order_by(Payment.payment_date.desc(), Payment.id.desc())
            .all()
        )

    def add(self, data: PaymentCreate, actor: Actor) -> Payment:
        case = self.db.get(Case, data.case_id)
        if not case:
            raise NotFoundError("Case", data.case_id)

        if data.payment_type == PaymentType.cheque:
            if not (data.cheque_name or "").strip():
                raise ValidationError("cheque_name is required for cheque payments", field="cheque_name")
            if not (data.cheque_number or "").strip():
                raise ValidationError("cheque_number is required for cheque payments", field="cheque_number")

        amount = Decimal(str(data.amount))
        payment = Payment(**data.model_dump(exclude={"amount"}), amount=amount, user_id=actor.user_id)
        case.balance = Decimal(case.balance or 0) - amount

        self.db.add(payment)
        self._commit("add payment")
        self.db.refresh(payment)
        logger.info("Payment %s of %s recorded on case %s", payment.id, amount, case.id)
        return payment

    def delete(self, payment_id: int) -> int:
        payment = self.get(payment_id)
        case = payment.case
        if case is not None:
            case.balance = Decimal(case.balance or 0) + Decimal(payment.amount)

        self.db.delete(payment)
        self._commit("delete payment")
        logger.info("Payment %s deleted", payment_id)
        return payment_id

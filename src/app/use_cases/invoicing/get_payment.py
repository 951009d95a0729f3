"""Get Payment Use Case"""

from libs.result import Result, Return, Error
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.errors import ErrorCode
from .dtos import PaymentResponseDTO
from .mappers import to_payment_dto


class GetPayment:
    def __init__(self, payment_repo: PaymentRepository):
        self.payment_repo = payment_repo

    async def execute(self, payment_id: int) -> Result[PaymentResponseDTO]:
        payment = await self.payment_repo.get_by_id(payment_id)
        if not payment:
            return Return.err(
                Error(
                    code=ErrorCode.NOT_FOUND.value,
                    message=f"Payment {payment_id} not found",
                )
            )
        return Return.ok(to_payment_dto(payment))

"""SQLAlchemy Invoice Number Allocator

Allocates invoice numbers from the per-year counter row with a single
atomic upsert-increment-returning statement.
"""

import logging
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel.ext.asyncio.session import AsyncSession
from src.app.services.invoice_number_allocator import InvoiceNumberAllocator
from src.domain.invoice_counter import InvoiceCounter, format_invoice_number

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SqlAlchemyInvoiceNumberAllocator(InvoiceNumberAllocator):
    """
    Invoice number allocator backed by the invoice_counters table

    Emits:
        INSERT INTO invoice_counters (year, last_value) VALUES (:year, 1)
        ON CONFLICT (year) DO UPDATE
            SET last_value = invoice_counters.last_value + 1
        RETURNING last_value

    The statement locks the counter row until the surrounding transaction
    ends, so concurrent creators queue on it instead of reading the same
    value. If the transaction rolls back, so does the increment.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def allocate(self, year: int) -> str:
        dialect = self.session.get_bind().dialect.name
        insert = _DIALECT_INSERTS.get(dialect)
        if insert is None:
            raise NotImplementedError(
                f"Atomic invoice numbering is not supported on dialect '{dialect}'"
            )

        table = InvoiceCounter.__table__
        statement = (
            insert(table)
            .values(year=year, last_value=1)
            .on_conflict_do_update(
                index_elements=[table.c.year],
                set_={"last_value": table.c.last_value + 1},
            )
            .returning(table.c.last_value)
        )
        result = await self.session.execute(statement)
        sequence = result.scalar_one()

        invoice_number = format_invoice_number(year, sequence)
        logger.debug(f"Allocated invoice number {invoice_number}")
        return invoice_number

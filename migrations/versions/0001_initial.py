"""invoices, line items, payments and invoice counters

Revision ID: 0001
Revises:
Create Date: 2025-01-29 10:00:00

"""
from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

IdType = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade():
    op.create_table(
        "invoices",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column("customer_id", sa.String(64), nullable=False),
        sa.Column("invoice_number", sa.String(32), nullable=False),
        sa.Column(
            "status",
            sa.Enum("DRAFT", "SENT", "PAID", name="invoicestatus"),
            nullable=False,
        ),
        sa.Column("subtotal", sa.Numeric(19, 2), nullable=False),
        sa.Column("discount", sa.Numeric(19, 2), nullable=False),
        sa.Column("total", sa.Numeric(19, 2), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=True),
        sa.Column("issued_date", sa.Date(), nullable=True),
        sa.Column("paid_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("discount >= 0", name="invoice_discount_non_negative"),
        sa.CheckConstraint("total >= 0", name="invoice_total_non_negative"),
    )
    op.create_index("ix_invoices_customer_id", "invoices", ["customer_id"])
    op.create_index("ix_invoices_status", "invoices", ["status"])
    op.create_index("ix_invoices_invoice_number", "invoices", ["invoice_number"], unique=True)

    op.create_table(
        "line_items",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column(
            "invoice_id",
            IdType,
            sa.ForeignKey("invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("description", sa.String(255), nullable=False),
        sa.Column("quantity", sa.Numeric(18, 4), nullable=False),
        sa.Column("unit_price", sa.Numeric(19, 2), nullable=False),
        sa.Column("amount", sa.Numeric(19, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quantity > 0", name="line_item_quantity_positive"),
        sa.CheckConstraint("unit_price >= 0", name="line_item_unit_price_non_negative"),
    )
    op.create_index("ix_line_items_invoice_id", "line_items", ["invoice_id"])

    op.create_table(
        "payments",
        sa.Column("id", IdType, primary_key=True, autoincrement=True),
        sa.Column(
            "invoice_id",
            IdType,
            sa.ForeignKey("invoices.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("amount", sa.Numeric(19, 2), nullable=False),
        sa.Column(
            "payment_method",
            sa.Enum("CASH", "CARD", "WIRE", "ACH", "CHECK", "OTHER", name="paymentmethod"),
            nullable=False,
        ),
        sa.Column("payment_date", sa.Date(), nullable=False),
        sa.Column("notes", sa.String(500), nullable=True),
        sa.Column("idempotency_key", sa.String(36), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("amount > 0", name="payment_amount_positive"),
        sa.UniqueConstraint(
            "invoice_id", "idempotency_key", name="uq_payments_invoice_idempotency_key"
        ),
    )
    op.create_index("ix_payments_invoice_created", "payments", ["invoice_id", "created_at"])

    op.create_table(
        "invoice_counters",
        sa.Column("year", sa.Integer(), primary_key=True, autoincrement=False),
        sa.Column("last_value", sa.BigInteger(), nullable=False),
        sa.CheckConstraint("last_value >= 0", name="invoice_counter_non_negative"),
    )


def downgrade():
    op.drop_table("invoice_counters")
    op.drop_index("ix_payments_invoice_created", table_name="payments")
    op.drop_table("payments")
    op.drop_index("ix_line_items_invoice_id", table_name="line_items")
    op.drop_table("line_items")
    op.drop_index("ix_invoices_invoice_number", table_name="invoices")
    op.drop_index("ix_invoices_status", table_name="invoices")
    op.drop_index("ix_invoices_customer_id", table_name="invoices")
    op.drop_table("invoices")
    sa.Enum(name="paymentmethod").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="invoicestatus").drop(op.get_bind(), checkfirst=True)

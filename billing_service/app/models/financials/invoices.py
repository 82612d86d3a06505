import uuid
from sqlalchemy import (
    Boolean, Column, Integer, String, Date, Numeric, Text, ForeignKey, DateTime, Uuid, func, UniqueConstraint
)
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid(as_uuid=True),
                    ForeignKey("orgs.id"), nullable=False)
    lease_id = Column(Uuid(as_uuid=True),
                      ForeignKey("leases.id"), nullable=False)
    tenant_id = Column(Uuid(as_uuid=True), nullable=False)
    space_id = Column(Uuid(as_uuid=True), nullable=False)

    invoice_no = Column(String(64), nullable=False)
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    # 0 for the first invoice of a period, bumped by forced regeneration
    revision = Column(Integer, default=0, nullable=False)

    subtotal = Column(Numeric(14, 2), nullable=False)
    tax = Column(Numeric(14, 2), default=0, nullable=False)
    total = Column(Numeric(14, 2), nullable=False)
    currency = Column(String(8), default="ETB")
    # draft|sent|paid|overdue|cancelled
    status = Column(String(16), default="draft", nullable=False)
    notes = Column(Text)
    paid_at = Column(DateTime(timezone=True))
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True),
                        server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("org_id", "invoice_no",
                         name="uq_invoice_org_invoice_no"),
        # one invoice per lease period (per revision)
        UniqueConstraint("lease_id", "period_start", "period_end", "revision",
                         name="uq_invoice_lease_period_revision"),
    )

    # Relationships
    lines = relationship(
        "InvoiceLine", back_populates="invoice", cascade="all, delete-orphan",
        order_by="InvoiceLine.position")
    lease = relationship("Lease", back_populates="invoices")

# -------------------
# Invoice Lines
# -------------------


class InvoiceLine(Base):
    __tablename__ = "invoice_lines"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    invoice_id = Column(Uuid(as_uuid=True), ForeignKey(
        "invoices.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    item_type = Column(String(16), nullable=False)  # rent|charge|penalty|deposit|other
    description = Column(Text, nullable=False)
    amount = Column(Numeric(14, 2), nullable=False)

    # Relationship
    invoice = relationship("Invoice", back_populates="lines")

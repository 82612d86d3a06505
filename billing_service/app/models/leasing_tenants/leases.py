import uuid
from sqlalchemy import Boolean, Column, Integer, String, Date, Numeric, ForeignKey, DateTime, JSON, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Lease(Base):
    __tablename__ = "leases"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid(as_uuid=True), ForeignKey("orgs.id"), nullable=False)
    tenant_id = Column(Uuid(as_uuid=True), ForeignKey(
        "tenants.id"), nullable=False)
    # unit the lease covers
    space_id = Column(Uuid(as_uuid=True), nullable=False)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)  # NULL for month-to-month

    rent_amount = Column(Numeric(14, 2), nullable=False)
    deposit_amount = Column(Numeric(14, 2), nullable=True)
    billing_cycle = Column(String(16), default="monthly", nullable=False)
    due_day = Column(Integer, default=1, nullable=False)

    # [{"name": ..., "amount": ..., "frequency": "monthly|quarterly|annually|one-time"}]
    additional_charges = Column(JSON().with_variant(JSONB, "postgresql"))
    status = Column(String(16), default="active")
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    is_deleted = Column(Boolean, default=False, nullable=False)

    # relationships
    org = relationship("Org", back_populates="leases")
    tenant = relationship("Tenant", back_populates="leases")
    invoices = relationship("Invoice", back_populates="lease")

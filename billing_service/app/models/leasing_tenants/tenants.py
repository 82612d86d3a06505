# app/models/leasing_tenants/tenants.py
import uuid
from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid(as_uuid=True), ForeignKey("orgs.id"), nullable=False)
    name = Column(String)
    email = Column(String)
    phone = Column(String)
    status = Column(String(16), default="active", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    is_deleted = Column(Boolean, default=False, nullable=False)

    leases = relationship("Lease", back_populates="tenant")

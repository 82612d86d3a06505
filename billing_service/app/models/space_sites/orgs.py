# app/models/space_sites/orgs.py
import uuid
from sqlalchemy import Column, String, DateTime, Uuid, func
from sqlalchemy.orm import relationship
from shared.core.database import Base


class Org(Base):
    __tablename__ = "orgs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(200), nullable=False)
    legal_name = Column(String(200))
    billing_email = Column(String(200))
    contact_phone = Column(String(32))
    # NULL is treated the same as active by the invoice scheduler
    status = Column(String(16), default="active")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    leases = relationship("Lease", back_populates="org")

import logging
from typing import List, Optional
from uuid import UUID
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from ...enum.leasing_tenants_enum import LeaseStatus
from ...models.leasing_tenants.leases import Lease
from ...schemas.leasing_tenants.leases_schemas import LeaseOut

logger = logging.getLogger(__name__)


# ----------------------------------------------------
# Queries
# ----------------------------------------------------
def get_active_leases(db: Session, org_id: UUID) -> List[Lease]:
    return (
        db.query(Lease)
        .filter(
            Lease.org_id == org_id,
            Lease.status == LeaseStatus.active.value,
            Lease.is_deleted == False
        )
        .order_by(Lease.start_date, Lease.id)
        .all()
    )


def get_by_id(db: Session, lease_id: UUID, org_id: Optional[UUID] = None) -> Optional[Lease]:
    query = db.query(Lease).filter(Lease.id == lease_id, Lease.is_deleted == False)
    if org_id:
        query = query.filter(Lease.org_id == org_id)
    return query.first()


# ----------------------------------------------------
# Lease repository used by invoice generation
# ----------------------------------------------------
class LeaseCrudRepository:

    def __init__(self, db: Session):
        self.db = db

    def list_active_leases(self, organization_id: UUID) -> List[LeaseOut]:
        leases = []
        for lease in get_active_leases(self.db, organization_id):
            try:
                leases.append(LeaseOut.model_validate(lease))
            except PydanticValidationError as e:
                logger.error("Skipping lease %s of org %s, unreadable billing terms: %s",
                             lease.id, organization_id, e)
        return leases

    def find_lease_by_id(self, lease_id: UUID, organization_id: UUID) -> Optional[LeaseOut]:
        lease = get_by_id(self.db, lease_id, organization_id)
        return LeaseOut.model_validate(lease) if lease else None

from typing import List, Optional
from uuid import UUID
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...enum.space_sites_enum import OrgStatus
from ...models.space_sites.orgs import Org
from ...schemas.financials.invoice_generation_schemas import OrganizationRef


def get_active_orgs(db: Session) -> List[Org]:
    return (
        db.query(Org)
        .filter(or_(Org.status == OrgStatus.ACTIVE.value, Org.status.is_(None)))
        .order_by(Org.name)
        .all()
    )


def get_org_by_id(db: Session, org_id: UUID) -> Optional[Org]:
    return db.query(Org).filter(Org.id == org_id).first()


class OrgCrudRegistry:

    def __init__(self, db: Session):
        self.db = db

    def list_active_organizations(self) -> List[OrganizationRef]:
        return [OrganizationRef.model_validate(org) for org in get_active_orgs(self.db)]

    def find_organization_by_id(self, organization_id: UUID) -> Optional[OrganizationRef]:
        org = get_org_by_id(self.db, organization_id)
        return OrganizationRef.model_validate(org) if org else None

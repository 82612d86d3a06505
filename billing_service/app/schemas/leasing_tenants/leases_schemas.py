from datetime import date
from decimal import Decimal
from uuid import UUID
from typing import List, Optional
from pydantic import BaseModel, field_validator

from shared.utils.enums import BillingCycle


class AdditionalCharge(BaseModel):
    name: str
    amount: Decimal
    # ChargeFrequency value; anything else never recurs
    frequency: str

    model_config = {"from_attributes": True}


class LeaseOut(BaseModel):
    id: UUID
    org_id: UUID
    tenant_id: UUID
    space_id: UUID
    # BillingCycle value; unknown cycles use the fallback period length
    billing_cycle: str = BillingCycle.monthly.value
    due_day: int = 1
    rent_amount: Decimal
    additional_charges: Optional[List[AdditionalCharge]] = None
    start_date: date
    end_date: Optional[date] = None
    status: str

    model_config = {"from_attributes": True}

    @field_validator("billing_cycle", mode="before")
    @classmethod
    def default_billing_cycle(cls, v):
        if isinstance(v, BillingCycle):
            return v.value
        return v or BillingCycle.monthly.value

    @field_validator("additional_charges", mode="before")
    @classmethod
    def empty_charges_to_none(cls, v):
        if v == [] or v == {}:
            return None
        return v

from enum import Enum


class LeaseStatus(str, Enum):
    # only active leases are invoiced
    active = "active"
    pending = "pending"
    draft = "draft"
    expired = "expired"
    terminated = "terminated"

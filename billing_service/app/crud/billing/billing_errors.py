from enum import Enum


class BillingErrorKind(str, Enum):
    validation = "validation"
    not_found = "not_found"
    cross_org = "cross_org"
    inactive_lease = "inactive_lease"
    duplicate_invoice = "duplicate_invoice"
    lease_not_active_for_period = "lease_not_active_for_period"


class BillingError(Exception):
    """Base error of the invoice generation engine.

    Callers branch on ``kind``; the message is for humans only.
    """

    kind: BillingErrorKind = BillingErrorKind.validation

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BillingError):
    kind = BillingErrorKind.validation


class NotFoundError(BillingError):
    kind = BillingErrorKind.not_found


class CrossOrgError(BillingError):
    kind = BillingErrorKind.cross_org


class InactiveLeaseError(BillingError):
    kind = BillingErrorKind.inactive_lease


class DuplicateInvoiceError(BillingError):
    kind = BillingErrorKind.duplicate_invoice


class LeaseNotActiveForPeriodError(BillingError):
    kind = BillingErrorKind.lease_not_active_for_period


class OrganizationRegistryError(Exception):
    """Raised when the set of organizations to bill cannot be resolved."""

from enum import Enum


class BillingCycle(str, Enum):
    monthly = "monthly"
    quarterly = "quarterly"
    annually = "annually"


class ChargeFrequency(str, Enum):
    one_time = "one-time"
    monthly = "monthly"
    quarterly = "quarterly"
    annually = "annually"


class InvoiceStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    paid = "paid"
    overdue = "overdue"
    cancelled = "cancelled"


class InvoiceItemType(str, Enum):
    rent = "rent"
    charge = "charge"
    penalty = "penalty"
    deposit = "deposit"
    other = "other"


class NotificationChannel(str, Enum):
    email = "email"
    sms = "sms"
    in_app = "in_app"

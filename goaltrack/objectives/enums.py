"""Objective enumerations."""

from enum import Enum


class Category(str, Enum):
    SPIRITUAL = "spiritual"
    PROFESSIONAL = "professional"
    PERSONAL = "personal"
    FINANCE = "finance"


class TrackingType(str, Enum):
    BOOLEAN = "boolean"
    COUNTER = "counter"
    NUMERIC = "numeric"


class Cadence(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class Status(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


CATEGORY_LABELS = {
    Category.SPIRITUAL: "Spiritual Objectives",
    Category.PROFESSIONAL: "Professional Objectives",
    Category.PERSONAL: "Personal Objectives",
    Category.FINANCE: "Financial Objectives",
}

TRACKING_LABELS = {
    TrackingType.BOOLEAN: "Boolean (Yes/No)",
    TrackingType.COUNTER: "Counter",
    TrackingType.NUMERIC: "Numeric value",
}

CADENCE_LABELS = {
    Cadence.DAILY: "Daily",
    Cadence.WEEKLY: "Weekly",
    Cadence.MONTHLY: "Monthly",
}

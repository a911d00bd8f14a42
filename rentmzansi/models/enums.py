"""
Unified enums for the engagement engine
Values are the strings persisted in storage and returned by the API
"""
import enum


class NotificationType(str, enum.Enum):
    """Kinds of inbox notifications"""
    NEW_LISTING = "new-listing"  # Listing matches a saved search
    PRICE_DROP = "price-drop"    # Favorited listing got cheaper
    SAVED_AREA = "saved-area"    # New listing in a subscribed area


class BadgeColor(str, enum.Enum):
    """Display colors of the landlord response-time badge"""
    GREEN = "green"
    AMBER = "amber"
    GRAY = "gray"


class ReportReason(str, enum.Enum):
    """Reasons a renter can give when reporting a listing"""
    FRAUD = "Fraud / Scam"
    INCORRECT_INFORMATION = "Incorrect Information"
    SAFETY_CONCERN = "Safety Concern"
    INAPPROPRIATE_CONTENT = "Inappropriate Content"
    OTHER = "Other"

from rentmzansi.models.enums import BadgeColor, NotificationType, ReportReason

__all__ = [
    "BadgeColor",
    "NotificationType",
    "ReportReason",
]

"""Domain constants for expense tracking and budgets."""

DEFAULT_QUERY_LIMIT = 100

NOTICE_THRESHOLD = 50
WARNING_THRESHOLD = 80
CRITICAL_THRESHOLD = 100

UNCATEGORIZED_LABEL = "Uncategorized"

RECEIPT_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")


__all__ = [
    "DEFAULT_QUERY_LIMIT",
    "NOTICE_THRESHOLD",
    "WARNING_THRESHOLD",
    "CRITICAL_THRESHOLD",
    "UNCATEGORIZED_LABEL",
    "RECEIPT_IMAGE_EXTENSIONS",
]

import re
from datetime import datetime, timezone


# ======================================================
# Helpers shared by the entity models
# ======================================================

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def utc_now_iso() -> str:
    """Timestamp format written into every collection."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def blank_to_none(value):
    """Empty sheet cells come back as "" for optional references."""
    if value is None:
        return None
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def stringify(value):
    """Text columns may come back numeric from the sheet or from CSV import."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


def require_text(value, label: str):
    if value is None or not str(value).strip():
        raise ValueError(f"{label} is required")
    return str(value).strip()


def require_email(value, label: str = "Email"):
    value = require_text(value, label)
    if not EMAIL_PATTERN.match(value):
        raise ValueError(f"Invalid email address: {value}")
    return value


def parse_timestamp(value) -> datetime:
    """ISO timestamp (with optional trailing Z) → aware datetime; bad values sort first."""
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return datetime.min.replace(tzinfo=timezone.utc)
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return datetime.min.replace(tzinfo=timezone.utc)

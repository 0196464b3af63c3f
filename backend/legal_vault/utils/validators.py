"""
Custom validators
"""
import re
from typing import Any, Optional, Tuple

from legal_vault.utils.exceptions import ValidationError

UPLOAD_FOLDERS = {
    "supportingDocs": {"application/pdf"},
    "taskedDocs": {"application/pdf"},
    "referenceDocs": {"application/pdf"},
    "profiles": {"image/jpeg", "image/png", "image/jpg"},
}

# Folders only Admins and Lawyers may download from
RESTRICTED_FOLDERS = {"supportingDocs", "taskedDocs"}


def require_text(value: Optional[Any], field: str) -> str:
    """Return the stripped value or raise if it is blank"""
    text = str(value).strip() if value is not None else ""
    if not text:
        raise ValidationError(f"{field} is required", field=field)
    return text


def validate_fee_range(fee: Optional[dict]) -> Tuple[float, float]:
    """
    Validate a {"min": ..., "max": ...} fee range.
    Both ends must be numbers and min must not exceed max.
    """
    if not isinstance(fee, dict) or fee.get("min") is None or fee.get("max") is None:
        raise ValidationError("Fee range is required", field="fee")
    try:
        min_fee = float(fee["min"])
        max_fee = float(fee["max"])
    except (TypeError, ValueError):
        raise ValidationError("Fee values must be numbers", field="fee")
    if min_fee < 0 or min_fee > max_fee:
        raise ValidationError("Fee range must satisfy 0 <= min <= max", field="fee")
    return min_fee, max_fee


def validate_upload(folder: str, content_type: str, file_size: int, max_size: int) -> None:
    allowed = UPLOAD_FOLDERS.get(folder)
    if allowed is None:
        raise ValidationError(f"Unknown upload folder: {folder}", field="folder")
    if content_type not in allowed:
        raise ValidationError(
            f"Content type {content_type} is not allowed in {folder}", field="content_type"
        )
    if file_size > max_size:
        raise ValidationError(f"File exceeds the {max_size} byte limit", field="file_size")


def validate_phone(phone: str) -> bool:
    """Accepts +639171234567, 09171234567 or plain digits of 7 to 15"""
    pattern = r'^\+?\d{7,15}$'
    return bool(re.match(pattern, phone.replace(" ", "").replace("-", "")))

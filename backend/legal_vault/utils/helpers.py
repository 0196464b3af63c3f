"""
Utility helper functions
"""
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Request

from legal_vault.utils.exceptions import ValidationError


def apply_partial_update(
    instance: Any,
    changes: Dict[str, Any],
    required: Iterable[str] = (),
) -> List[str]:
    """
    Copy a partial update onto an ORM instance.

    `changes` must contain only the fields the caller actually sent
    (``model_dump(exclude_unset=True)``): absent keys leave the stored value
    untouched, an explicit None clears a nullable column. None on a column
    listed in `required` is rejected.

    Returns the names of the fields whose value changed.
    """
    required = set(required)
    changed = []
    for field, value in changes.items():
        if value is None and field in required:
            raise ValidationError(f"{field} cannot be null", field=field)
        if getattr(instance, field) != value:
            setattr(instance, field, value)
            changed.append(field)
    return changed


def dedupe(items: Optional[Iterable[Any]]) -> List[Any]:
    """Drop duplicates and blanks, keeping first-seen order"""
    seen = set()
    out = []
    for item in items or []:
        if item is None or (isinstance(item, str) and not item.strip()):
            continue
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def normalize_viewer_ids(viewer_ids: Optional[Iterable[Any]]) -> Optional[List[int]]:
    """Integer set of viewer ids, or None when there are none"""
    try:
        ids = dedupe(int(v) for v in (viewer_ids or []))
    except (TypeError, ValueError):
        raise ValidationError("allowed_viewers must be a list of user ids", field="allowed_viewers")
    return ids or None


def like_pattern(term: Optional[str]) -> str:
    """ILIKE pattern matching `term` anywhere"""
    return f"%{(term or '').strip()}%"


def format_amount(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def format_fee_range(min_fee: float, max_fee: float) -> str:
    """Display string stored on case types, e.g. '₱1,000 - ₱5,000'"""
    return f"₱{format_amount(min_fee)} - ₱{format_amount(max_fee)}"


def client_ip(request: Request) -> Optional[str]:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else None


def mask_email(email: str) -> str:
    name, _, domain = (email or "").partition("@")
    if not domain:
        return email
    return f"{name[:2]}***@{domain}"

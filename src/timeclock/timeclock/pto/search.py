"""Free-text filter for PTO request listings."""

from __future__ import annotations

import calendar
import re
from typing import Iterable, List

from ..users.model import populated_user
from .model import PTORequest

MONTH_NAMES = {name.lower(): number for number, name in enumerate(calendar.month_name) if name}

_NUMBER = re.compile(r"-?\d+(\.\d+)?")


def _months_for(text: str) -> set[int]:
    return {number for name, number in MONTH_NAMES.items() if name in text or text in name}


def matches_search(
    req: PTORequest,
    search: str,
    *,
    split_terms: bool = False,
    include_owner: bool = False,
    month_names: bool = True,
) -> bool:
    """True when ``req`` matches ``search`` (case-insensitive).

    Text fields are reason and status, plus the owner's names and email
    with ``include_owner``. With ``split_terms`` any whitespace-separated
    term may match a text field. Plain numbers also match exact hours;
    date searches match the ``YYYY-MM-DD`` form or, with ``month_names``,
    a month name.
    """
    text = (search or "").strip().lower()
    if not text:
        return True

    fields = [req.reason.lower(), req.status.value]
    user = populated_user(req.owner) if include_owner else None
    if user:
        fields.extend([user.first_name.lower(), user.last_name.lower(), user.email.lower()])

    terms = text.split() if split_terms else [text]
    if any(term in field for term in terms for field in fields):
        return True

    if _NUMBER.fullmatch(text) and float(text) == req.hours:
        return True

    if text in req.request_date.isoformat():
        return True
    return month_names and req.request_date.month in _months_for(text)


def filter_requests(requests: Iterable[PTORequest], search: str | None, **options) -> List[PTORequest]:
    return [r for r in requests if matches_search(r, search or "", **options)]

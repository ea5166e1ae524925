"""
storage.py
JSON persistence for the member list.

The whole document is rewritten on every save:
    {"members": [{"id": "10001", "name": ..., "tags": [...], ...}, ...]}
Each member record is validated field by field on load.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable

from models import (
    Address,
    Credit,
    Email,
    Id,
    IllegalValueError,
    Member,
    Name,
    Phone,
    Reservation,
    Tag,
    Timestamp,
    Transaction,
)

log = logging.getLogger("ezfoodie.storage")

MISSING_FIELD_MESSAGE_FORMAT = "Member's {} field is missing!"
MESSAGE_DUPLICATE_MEMBER = "Members list contains duplicate member(s)."

# JSON key -> value type, in record order
_SCALAR_FIELDS = (
    ("id", Id),
    ("name", Name),
    ("phone", Phone),
    ("email", Email),
    ("address", Address),
    ("registrationTimestamp", Timestamp),
    ("credit", Credit),
)


class DataLoadingError(Exception):
    """The data file exists but cannot be turned into a member list."""


# ---------- Adapters ----------

def member_to_json(member: Member) -> dict[str, Any]:
    return {
        "id": str(member.id),
        "name": str(member.name),
        "phone": str(member.phone),
        "email": str(member.email),
        "address": str(member.address),
        "registrationTimestamp": str(member.registration_timestamp),
        "credit": str(member.credit),
        "tags": sorted(str(t) for t in member.tags),
        "transactions": sorted(str(t) for t in member.transactions),
        "reservations": [
            {"dateTime": r.date_time, "remark": r.remark}
            for r in sorted(member.reservations, key=str)
        ],
    }


def _reservation_from_json(data: Any) -> Reservation:
    if not isinstance(data, dict):
        raise IllegalValueError(Reservation.MESSAGE_CONSTRAINTS)
    date_time, remark = data.get("dateTime"), data.get("remark")
    if not isinstance(date_time, str) or not isinstance(remark, str):
        raise IllegalValueError(Reservation.MESSAGE_CONSTRAINTS)
    return Reservation.of(date_time, remark)


def _list_field(data: dict[str, Any], key: str, field_type: type) -> list:
    """An absent collection is empty; anything other than a JSON array is malformed."""
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise IllegalValueError(field_type.MESSAGE_CONSTRAINTS)
    return raw


def member_from_json(data: dict[str, Any]) -> Member:
    """
    Build a Member from one JSON record.
    Raises IllegalValueError naming a missing field, or carrying the constraint
    message of the first malformed one.
    """
    if not isinstance(data, dict):
        raise IllegalValueError("Member record must be a JSON object")

    values = {}
    for key, field_type in _SCALAR_FIELDS:
        raw = data.get(key)
        if raw is None:
            raise IllegalValueError(MISSING_FIELD_MESSAGE_FORMAT.format(field_type.__name__))
        values[key] = field_type(raw)

    return Member(
        id=values["id"],
        name=values["name"],
        phone=values["phone"],
        email=values["email"],
        address=values["address"],
        registration_timestamp=values["registrationTimestamp"],
        credit=values["credit"],
        tags=[Tag(t) for t in _list_field(data, "tags", Tag)],
        transactions=[Transaction(t) for t in _list_field(data, "transactions", Transaction)],
        reservations=[_reservation_from_json(r) for r in _list_field(data, "reservations", Reservation)],
    )


def members_from_document(document: Any) -> list[Member]:
    if not isinstance(document, dict) or not isinstance(document.get("members", []), list):
        raise IllegalValueError('Data file must hold an object with a "members" list')
    members: list[Member] = []
    for record in document.get("members", []):
        member = member_from_json(record)
        if any(m.is_same_member(member) for m in members):
            raise IllegalValueError(MESSAGE_DUPLICATE_MEMBER)
        members.append(member)
    return members


# ---------- File access ----------

@contextmanager
def _atomic_write(path: Path):
    """
    Write to a temporary file beside `path` and move it into place on success,
    so readers never see a half-written document.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            yield f
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


def read_members(path: Path) -> list[Member]:
    """
    Load members from `path`. A missing or empty file is an empty list.
    """
    if not path.exists():
        log.info("Data file %s not found, starting with an empty member list", path)
        return []
    try:
        text = path.read_text(encoding="utf-8").strip()
    except OSError as exc:
        raise DataLoadingError(f"Could not read {path}: {exc}") from exc
    if text == "":
        return []
    try:
        members = members_from_document(json.loads(text))
    except json.JSONDecodeError as exc:
        raise DataLoadingError(f"{path} is not valid JSON: {exc}") from exc
    except IllegalValueError as exc:
        raise DataLoadingError(f"Illegal values found in {path}: {exc}") from exc
    log.info("Loaded %d member(s) from %s", len(members), path)
    return members


def save_members(members: Iterable[Member], path: Path) -> None:
    document = {"members": [member_to_json(m) for m in members]}
    with _atomic_write(path) as f:
        json.dump(document, f, indent=2, ensure_ascii=False)
    log.debug("Saved %d member(s) to %s", len(document["members"]), path)

"""
models.py
Domain value types and the immutable Member record.

Every field of a member is a small frozen dataclass that validates its raw
string on construction. Invalid input raises IllegalValueError carrying the
field's fixed constraint message, so callers can show it to the user as-is.
"""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import ClassVar, Iterable


class IllegalValueError(ValueError):
    """Raised when a raw value does not satisfy a field's constraints."""


@dataclass(frozen=True)
class _Field:
    value: str

    PATTERN: ClassVar[re.Pattern]
    MESSAGE_CONSTRAINTS: ClassVar[str]

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.is_valid(self.value):
            raise IllegalValueError(self.MESSAGE_CONSTRAINTS)

    @classmethod
    def is_valid(cls, raw: str) -> bool:
        return cls.PATTERN.fullmatch(raw) is not None

    def __str__(self) -> str:
        return self.value


# ---------- Identity fields ----------

class Id(_Field):
    PATTERN = re.compile(r"\d{5}")
    MESSAGE_CONSTRAINTS = "Id should only contain numbers, and it should be 5 digits long"

    FIRST: ClassVar[int] = 10001
    LAST: ClassVar[int] = 99999

    @property
    def number(self) -> int:
        return int(self.value)


class Name(_Field):
    # first character must be alphanumeric so a name is never blank
    PATTERN = re.compile(r"[^\W_](?:[^\W_]| )*")
    MESSAGE_CONSTRAINTS = (
        "Names should only contain alphanumeric characters and spaces, and it should not be blank"
    )


class Phone(_Field):
    PATTERN = re.compile(r"\d{8}")
    MESSAGE_CONSTRAINTS = "Phone numbers should only contain numbers, and it should be 8 digits long"


_ALNUM = r"[^\W_]+"
_LABEL = _ALNUM + r"(?:-" + _ALNUM + r")*"


class Email(_Field):
    PATTERN = re.compile(
        _ALNUM + r"(?:[+_.\-]" + _ALNUM + r")*"
        r"@(?:" + _LABEL + r"\.)*(?=[^.]{2,}$)" + _LABEL
    )
    MESSAGE_CONSTRAINTS = (
        "Emails should be of the format local-part@domain and adhere to the following constraints:\n"
        "1. The local-part should only contain alphanumeric characters and these special characters, "
        "excluding the parentheses, (+_.-). The local-part may not start or end with any special "
        "characters.\n"
        "2. This is followed by a '@' and then a domain name. The domain name is made up of domain "
        "labels separated by periods.\n"
        "The domain name must:\n"
        "    - end with a domain label at least 2 characters long\n"
        "    - have each domain label start and end with alphanumeric characters\n"
        "    - have each domain label consist of alphanumeric characters, separated only by hyphens, "
        "if any."
    )


# ---------- Data fields ----------

class Address(_Field):
    PATTERN = re.compile(r"\S.*", re.DOTALL)
    MESSAGE_CONSTRAINTS = "Addresses can take any values, and it should not be blank"


class Tag(_Field):
    PATTERN = re.compile(_ALNUM)
    MESSAGE_CONSTRAINTS = "Tags names should be alphanumeric"


class Transaction(_Field):
    PATTERN = re.compile(r"\d{1,6}(?:\.\d{1,2})?")
    MESSAGE_CONSTRAINTS = (
        "Transaction amount should be a non-negative number with at most 6 digits "
        "before the decimal point and at most 2 after it"
    )

    @property
    def amount(self) -> float:
        return float(self.value)


class Reservation(_Field):
    PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2} \d{2}:\d{2}), (\S(?:.*\S)?)")
    MESSAGE_CONSTRAINTS = (
        "Reservations should be of the format YYYY-MM-DD HH:MM, REMARK where the date and time "
        "exist on the calendar and the remark is not blank"
    )
    DATE_TIME_FORMAT: ClassVar[str] = "%Y-%m-%d %H:%M"

    @classmethod
    def is_valid(cls, raw: str) -> bool:
        match = cls.PATTERN.fullmatch(raw)
        if match is None:
            return False
        try:
            datetime.strptime(match.group(1), cls.DATE_TIME_FORMAT)
        except ValueError:
            return False
        return True

    @classmethod
    def of(cls, date_time: str, remark: str) -> Reservation:
        return cls(f"{date_time}, {remark}")

    @property
    def date_time(self) -> str:
        return self.PATTERN.fullmatch(self.value).group(1)

    @property
    def remark(self) -> str:
        return self.PATTERN.fullmatch(self.value).group(2)


class Credit(_Field):
    PATTERN = re.compile(r"\d{1,5}")
    MAX: ClassVar[int] = 99999
    MESSAGE_CONSTRAINTS = f"Credit should be a non-negative integer no larger than {MAX}"

    @property
    def amount(self) -> int:
        return int(self.value)

    @classmethod
    def from_transactions(cls, transactions: Iterable[Transaction]) -> Credit:
        """
        Credit earned from a set of transactions.
        Each transaction counts for its whole-number part; the total is capped at MAX.
        """
        total = sum(int(t.amount) for t in transactions)
        return cls(str(min(total, cls.MAX)))


class Timestamp(_Field):
    PATTERN = re.compile(r"\d{1,13}")
    MESSAGE_CONSTRAINTS = "Timestamp should be the number of milliseconds since the epoch"
    DISPLAY_FORMAT: ClassVar[str] = "%Y-%m-%d %H:%M"

    @classmethod
    def now(cls) -> Timestamp:
        return cls(str(int(time.time() * 1000)))

    @property
    def formatted(self) -> str:
        return datetime.fromtimestamp(int(self.value) / 1000).strftime(self.DISPLAY_FORMAT)


# ---------- Member ----------

def _sorted_str(values) -> list[str]:
    return sorted(str(v) for v in values)


@dataclass(frozen=True)
class Member:
    id: Id
    name: Name
    phone: Phone
    email: Email
    address: Address
    registration_timestamp: Timestamp
    credit: Credit
    tags: frozenset[Tag] = field(default_factory=frozenset)
    transactions: frozenset[Transaction] = field(default_factory=frozenset)
    reservations: frozenset[Reservation] = field(default_factory=frozenset)

    def __post_init__(self):
        for f in ("id", "name", "phone", "email", "address", "registration_timestamp", "credit",
                  "tags", "transactions", "reservations"):
            if getattr(self, f) is None:
                raise TypeError(f"Member.{f} must not be None")
        # accept any iterable for the collections, store them frozen
        object.__setattr__(self, "tags", frozenset(self.tags))
        object.__setattr__(self, "transactions", frozenset(self.transactions))
        object.__setattr__(self, "reservations", frozenset(self.reservations))

    # weak identity, used to detect duplicates
    def is_same_id(self, other: Member | None) -> bool:
        return other is not None and other.id == self.id

    def is_same_phone(self, other: Member | None) -> bool:
        return other is not None and other.phone == self.phone

    def is_same_email(self, other: Member | None) -> bool:
        return other is not None and other.email == self.email

    def is_same_member(self, other: Member | None) -> bool:
        return self.is_same_id(other) or self.is_same_phone(other) or self.is_same_email(other)

    def with_transactions(self, new_transactions: Iterable[Transaction]) -> Member:
        transactions = self.transactions | frozenset(new_transactions)
        return replace(self, transactions=transactions, credit=Credit.from_transactions(transactions))

    def with_reservations(self, new_reservations: Iterable[Reservation]) -> Member:
        return replace(self, reservations=self.reservations | frozenset(new_reservations))

    def __str__(self) -> str:
        parts = [
            f"Id: {self.id}",
            f"Name: {self.name}",
            f"Phone: {self.phone}",
            f"Email: {self.email}",
            f"Address: {self.address}",
            f"Registration Timestamp: {self.registration_timestamp.formatted}",
            f"Credit: {self.credit}",
        ]
        if self.tags:
            parts.append("Tags: " + "".join(f"[{t}]" for t in _sorted_str(self.tags)))
        if self.transactions:
            parts.append("Transactions: " + ", ".join(_sorted_str(self.transactions)))
        if self.reservations:
            parts.append("Reservations: " + "; ".join(_sorted_str(self.reservations)))
        return "; ".join(parts)


@dataclass(frozen=True)
class EditMemberDescriptor:
    """
    The fields a user supplied in an edit command.
    A field left as None keeps the member's current value.
    """
    name: Name | None = None
    phone: Phone | None = None
    email: Email | None = None
    address: Address | None = None
    tags: frozenset[Tag] | None = None
    transactions: frozenset[Transaction] | None = None
    reservations: frozenset[Reservation] | None = None

    def is_any_field_edited(self) -> bool:
        return any(getattr(self, f) is not None for f in (
            "name", "phone", "email", "address", "tags", "transactions", "reservations"
        ))

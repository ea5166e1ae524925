"""Shared fixtures: a few typical members and a book holding them."""

from __future__ import annotations

import pytest

from member_book import MemberBook
from models import (
    Address,
    Credit,
    Email,
    Id,
    Member,
    Name,
    Phone,
    Reservation,
    Tag,
    Timestamp,
    Transaction,
)


def make_member(
    id_: str = "10001",
    name: str = "Alice Pauline",
    phone: str = "94351253",
    email: str = "alice@example.com",
    address: str = "123, Jurong West Ave 6, #08-111",
    timestamp: str = "1635724800000",
    tags: tuple[str, ...] = (),
    transactions: tuple[str, ...] = (),
    reservations: tuple[str, ...] = (),
) -> Member:
    txns = [Transaction(t) for t in transactions]
    return Member(
        id=Id(id_),
        name=Name(name),
        phone=Phone(phone),
        email=Email(email),
        address=Address(address),
        registration_timestamp=Timestamp(timestamp),
        credit=Credit.from_transactions(txns),
        tags=[Tag(t) for t in tags],
        transactions=txns,
        reservations=[Reservation(r) for r in reservations],
    )


ALICE = make_member(tags=("friends",), transactions=("100", "20.50"))
BENSON = make_member(
    "10002", "Benson Meier", "98765432", "johnd@example.com", "311, Clementi Ave 2, #02-25",
    "1635811200000", tags=("owesMoney", "friends"), reservations=("2021-12-24 19:30, 4 people",),
)
CARL = make_member("10003", "Carl Kurz", "95352563", "heinz@example.com", "wall street", "1635897600000")
DANIEL = make_member(
    "10004", "Daniel Meier", "87652533", "cornelia@example.com", "10th street", "1635984000000",
    tags=("friends",), transactions=("99999",),
)


@pytest.fixture
def typical_members() -> list[Member]:
    return [ALICE, BENSON, CARL, DANIEL]


@pytest.fixture
def book(typical_members) -> MemberBook:
    return MemberBook(typical_members)


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "ezfoodie.json"

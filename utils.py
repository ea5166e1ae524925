"""
utils.py
Tables, exports, sample data.
"""

from __future__ import annotations

from typing import Iterable

import pandas as pd

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

MEMBER_COLUMNS = [
    "id", "name", "phone", "email", "address", "registered", "credit",
    "tags", "transactions", "reservations",
]


def member_row(member: Member) -> dict:
    return {
        "id": str(member.id),
        "name": str(member.name),
        "phone": str(member.phone),
        "email": str(member.email),
        "address": str(member.address),
        "registered": member.registration_timestamp.formatted,
        "credit": member.credit.amount,
        "tags": ", ".join(sorted(str(t) for t in member.tags)),
        "transactions": ", ".join(sorted(str(t) for t in member.transactions)),
        "reservations": "; ".join(sorted(str(r) for r in member.reservations)),
    }


def members_to_dataframe(members: Iterable[Member]) -> pd.DataFrame:
    rows = [member_row(m) for m in members]
    if not rows:
        return pd.DataFrame(columns=MEMBER_COLUMNS)
    return pd.DataFrame(rows, columns=MEMBER_COLUMNS)


def members_to_csv_bytes(members: Iterable[Member]) -> bytes:
    df = members_to_dataframe(members)
    return df.to_csv(index=False).encode("utf-8")


def transactions_to_csv_bytes(members: Iterable[Member]) -> bytes:
    rows = [
        {"member_id": str(m.id), "name": str(m.name), "amount": t.amount}
        for m in members
        for t in sorted(m.transactions, key=lambda t: t.amount)
    ]
    df = pd.DataFrame(rows, columns=["member_id", "name", "amount"])
    return df.to_csv(index=False).encode("utf-8")


def credit_summary(members: Iterable[Member]) -> dict:
    """
    Count, total and mean credit, and how many members sit at Credit.MAX.
    """
    credits = pd.Series([m.credit.amount for m in members], dtype="int64")
    if credits.empty:
        return {"members": 0, "total": 0, "mean": 0.0, "at_cap": 0}
    return {
        "members": int(credits.count()),
        "total": int(credits.sum()),
        "mean": round(float(credits.mean()), 2),
        "at_cap": int((credits >= Credit.MAX).sum()),
    }


def sample_members() -> list[Member]:
    """
    A handful of members for trying the app out. Registration times are fixed
    so the data is the same on every load.
    """
    def member(id_, name, phone, email, address, timestamp, tags=(), transactions=(), reservations=()):
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

    return [
        member("10001", "Alex Yeoh", "87438807", "alexyeoh@example.com", "Blk 30 Geylang Street 29, #06-40",
               "1635724800000", tags=["friends"], transactions=["120.50", "33"]),
        member("10002", "Bernice Yu", "99272758", "berniceyu@example.com",
               "Blk 30 Lorong 3 Serangoon Gardens, #07-18", "1635811200000",
               tags=["colleagues", "friends"], reservations=["2021-12-24 19:30, 4 people"]),
        member("10003", "Charlotte Oliveiro", "93210283", "charlotte@example.com",
               "Blk 11 Ang Mo Kio Street 74, #11-04", "1635897600000",
               tags=["neighbours"], transactions=["58.90"]),
        member("10004", "David Li", "91031282", "lidavid@example.com", "Blk 436 Serangoon Gardens Street 26, #16-43",
               "1635984000000", tags=["family"], transactions=["1000", "250.75"],
               reservations=["2021-12-31 20:00, window seat"]),
        member("10005", "Irfan Ibrahim", "92492021", "irfan@example.com", "Blk 47 Tampines Street 20, #17-35",
               "1636070400000", tags=["classmates"]),
        member("10006", "Roy Balakrishnan", "92624417", "royb@example.com", "Blk 45 Aljunied Street 85, #11-31",
               "1636156800000", tags=["colleagues"], transactions=["9.99"]),
    ]

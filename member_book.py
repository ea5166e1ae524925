"""
member_book.py
In-memory member list plus the filtered view the user is currently looking at.
"""

from __future__ import annotations

from typing import Callable, Iterable

from models import Id, Member

MemberPredicate = Callable[[Member], bool]


def show_all_members(member: Member) -> bool:
    return True


class DuplicateMemberError(ValueError):
    pass


class MemberNotFoundError(LookupError):
    pass


class MemberBook:
    """
    Owns the ordered member list. Members are immutable, so every change is a
    slot replacement, an append or a removal.
    """

    def __init__(self, members: Iterable[Member] = ()):
        self._members: list[Member] = []
        self._predicate: MemberPredicate = show_all_members
        for m in members:
            self.add_member(m)

    @property
    def members(self) -> tuple[Member, ...]:
        return tuple(self._members)

    def __len__(self) -> int:
        return len(self._members)

    # ---------- Queries ----------

    def get_updated_member_list(self) -> list[Member]:
        """Members matching the current filter, in list order."""
        return [m for m in self._members if self._predicate(m)]

    def has_member(self, candidate: Member, predicate: MemberPredicate = show_all_members) -> bool:
        """
        True if any member selected by `predicate` shares an id, phone or email
        with `candidate`.
        """
        return any(m.is_same_member(candidate) for m in self._members if predicate(m))

    def next_id(self) -> Id:
        if not self._members:
            return Id(str(Id.FIRST))
        number = max(m.id.number for m in self._members) + 1
        if number > Id.LAST:
            raise OverflowError("No member ids left to assign")
        return Id(str(number))

    # ---------- Mutations ----------

    def add_member(self, member: Member) -> None:
        if self.has_member(member):
            raise DuplicateMemberError(f"Duplicate member: {member.id}")
        self._members.append(member)

    def set_member(self, target: Member, edited: Member) -> None:
        try:
            i = self._members.index(target)
        except ValueError:
            raise MemberNotFoundError(f"Member {target.id} is not in the book") from None
        if self.has_member(edited, lambda m: m.id != target.id):
            raise DuplicateMemberError(f"Duplicate member: {edited.id}")
        self._members[i] = edited

    def delete_member(self, target: Member) -> None:
        try:
            self._members.remove(target)
        except ValueError:
            raise MemberNotFoundError(f"Member {target.id} is not in the book") from None

    def update_filtered_member_list(self, predicate: MemberPredicate) -> None:
        self._predicate = predicate

    def reset(self, members: Iterable[Member]) -> None:
        new_book = MemberBook(members)
        self._members = new_book._members
        self._predicate = show_all_members

    def snapshot(self) -> tuple[tuple[Member, ...], MemberPredicate]:
        return tuple(self._members), self._predicate

    def restore(self, snapshot: tuple[tuple[Member, ...], MemberPredicate]) -> None:
        members, predicate = snapshot
        self._members = list(members)
        self._predicate = predicate

"""
commands.py
Executable commands. Each command validates against the current MemberBook
first and only then mutates it, so a failed command leaves the book unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

from member_book import MemberBook, show_all_members
from models import (
    Address,
    Credit,
    EditMemberDescriptor,
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

log = logging.getLogger("ezfoodie.commands")

# Command syntax
PREFIX_MEMBER = "-mem"
PREFIX_TRANSACTION_MARKER = "-txn"
PREFIX_RESERVATION_MARKER = "-rs"
PREFIX_ID = "-id"
PREFIX_INDEX = "-i"
PREFIX_NAME = "-n"
PREFIX_PHONE = "-p"
PREFIX_EMAIL = "-e"
PREFIX_ADDRESS = "-a"
PREFIX_TAG = "-t"
PREFIX_TRANSACTION = "-b"
PREFIX_RESERVATION = "-r"

MESSAGE_INVALID_COMMAND_FORMAT = "Invalid command format! \n{}"
MESSAGE_UNKNOWN_COMMAND = "Unknown command"
MESSAGE_INVALID_MEMBER_DISPLAYED_INDEX = "The member index provided is invalid"
MESSAGE_INVALID_MEMBER_DISPLAYED_ID = "The member id provided is invalid"
MESSAGE_DUPLICATE_MEMBER = "This member already exists in the ezFoodie."
MESSAGE_MEMBERS_LISTED_OVERVIEW = "{} members listed!"


class CommandError(Exception):
    """A well-formed command that cannot be carried out against the current data."""


@dataclass(frozen=True)
class CommandResult:
    feedback: str
    show_help: bool = False


@dataclass(frozen=True)
class Index:
    zero_based: int

    def __post_init__(self):
        if self.zero_based < 0:
            raise IndexError("Index must be non-negative")

    @classmethod
    def from_one_based(cls, one_based: int) -> Index:
        return cls(one_based - 1)

    @property
    def one_based(self) -> int:
        return self.zero_based + 1


Locator = Union[Index, Id]


def resolve_member(book: MemberBook, locator: Locator) -> Member:
    """
    Find the member a command refers to within the displayed list, either by
    its 1-based position or by its id.
    """
    shown = book.get_updated_member_list()
    if isinstance(locator, Index):
        if locator.zero_based >= len(shown):
            raise CommandError(MESSAGE_INVALID_MEMBER_DISPLAYED_INDEX)
        return shown[locator.zero_based]
    for m in shown:
        if m.id == locator:
            return m
    raise CommandError(MESSAGE_INVALID_MEMBER_DISPLAYED_ID)


def _locator_text(locator: Locator) -> str:
    if isinstance(locator, Index):
        return f"{PREFIX_INDEX} {locator.one_based}"
    return f"{PREFIX_ID} {locator}"


# ---------- add ----------

@dataclass(frozen=True)
class AddMemberCommand:
    COMMAND_WORD = "add"
    MUTATES = True
    MESSAGE_USAGE = (
        f"{COMMAND_WORD} {PREFIX_MEMBER}: Adds a member to the ezFoodie.\n"
        f"Parameters: {PREFIX_MEMBER} {PREFIX_NAME} NAME {PREFIX_PHONE} PHONE {PREFIX_EMAIL} EMAIL "
        f"{PREFIX_ADDRESS} ADDRESS [{PREFIX_TAG} TAG]...\n"
        f"Example: {COMMAND_WORD} {PREFIX_MEMBER} {PREFIX_NAME} John Doe {PREFIX_PHONE} 98765432 "
        f"{PREFIX_EMAIL} johnd@example.com {PREFIX_ADDRESS} 311, Clementi Ave 2, #02-25 "
        f"{PREFIX_TAG} friends {PREFIX_TAG} owesMoney"
    )
    MESSAGE_SUCCESS = "New member added: {}"

    name: Name
    phone: Phone
    email: Email
    address: Address
    tags: frozenset[Tag] = field(default_factory=frozenset)

    def execute(self, book: MemberBook) -> CommandResult:
        try:
            member_id = book.next_id()
        except OverflowError as exc:
            raise CommandError(str(exc)) from exc
        member = Member(
            id=member_id,
            name=self.name,
            phone=self.phone,
            email=self.email,
            address=self.address,
            registration_timestamp=Timestamp.now(),
            credit=Credit("0"),
            tags=self.tags,
        )
        if book.has_member(member):
            raise CommandError(MESSAGE_DUPLICATE_MEMBER)
        book.add_member(member)
        book.update_filtered_member_list(show_all_members)
        log.info("Added member %s", member.id)
        return CommandResult(self.MESSAGE_SUCCESS.format(member))


@dataclass(frozen=True)
class AddTransactionsCommand:
    COMMAND_WORD = "add"
    MUTATES = True
    MESSAGE_USAGE = (
        f"{COMMAND_WORD} {PREFIX_TRANSACTION_MARKER}: Adds transactions to a member and updates "
        f"the member's credit.\n"
        f"Parameters: {PREFIX_TRANSACTION_MARKER} ({PREFIX_INDEX} INDEX | {PREFIX_ID} ID) "
        f"{PREFIX_TRANSACTION} AMOUNT [{PREFIX_TRANSACTION} AMOUNT]...\n"
        f"Example: {COMMAND_WORD} {PREFIX_TRANSACTION_MARKER} {PREFIX_ID} 10001 {PREFIX_TRANSACTION} 23.50"
    )
    MESSAGE_SUCCESS = "Added transactions to Member: {}"

    target: Locator
    transactions: frozenset[Transaction]

    def execute(self, book: MemberBook) -> CommandResult:
        member = resolve_member(book, self.target)
        updated = member.with_transactions(self.transactions)
        book.set_member(member, updated)
        book.update_filtered_member_list(show_all_members)
        log.info("Added %d transaction(s) to member %s, credit now %s",
                 len(self.transactions), updated.id, updated.credit)
        return CommandResult(self.MESSAGE_SUCCESS.format(updated))


@dataclass(frozen=True)
class AddReservationsCommand:
    COMMAND_WORD = "add"
    MUTATES = True
    MESSAGE_USAGE = (
        f"{COMMAND_WORD} {PREFIX_RESERVATION_MARKER}: Adds reservations to a member.\n"
        f"Parameters: {PREFIX_RESERVATION_MARKER} ({PREFIX_INDEX} INDEX | {PREFIX_ID} ID) "
        f"{PREFIX_RESERVATION} RESERVATION [{PREFIX_RESERVATION} RESERVATION]...\n"
        f"Example: {COMMAND_WORD} {PREFIX_RESERVATION_MARKER} {PREFIX_INDEX} 1 "
        f"{PREFIX_RESERVATION} 2021-12-24 19:30, 4 people"
    )
    MESSAGE_SUCCESS = "Added reservations to Member: {}"

    target: Locator
    reservations: frozenset[Reservation]

    def execute(self, book: MemberBook) -> CommandResult:
        member = resolve_member(book, self.target)
        updated = member.with_reservations(self.reservations)
        book.set_member(member, updated)
        book.update_filtered_member_list(show_all_members)
        log.info("Added %d reservation(s) to member %s", len(self.reservations), updated.id)
        return CommandResult(self.MESSAGE_SUCCESS.format(updated))


# ---------- edit ----------

def create_edited_member(member: Member, descriptor: EditMemberDescriptor) -> Member:
    """
    Merge `descriptor` into `member`. Id and registration timestamp never change;
    credit follows the resulting transaction set.
    """
    def pick(name):
        value = getattr(descriptor, name)
        return getattr(member, name) if value is None else value

    transactions = pick("transactions")
    return Member(
        id=member.id,
        name=pick("name"),
        phone=pick("phone"),
        email=pick("email"),
        address=pick("address"),
        registration_timestamp=member.registration_timestamp,
        credit=Credit.from_transactions(transactions),
        tags=pick("tags"),
        transactions=transactions,
        reservations=pick("reservations"),
    )


_EDIT_FIELDS = (
    f"[{PREFIX_NAME} NAME] [{PREFIX_PHONE} PHONE] [{PREFIX_EMAIL} EMAIL] [{PREFIX_ADDRESS} ADDRESS] "
    f"[{PREFIX_TAG} TAG]... [{PREFIX_TRANSACTION} TRANSACTION]... [{PREFIX_RESERVATION} RESERVATION]..."
)


@dataclass(frozen=True)
class EditCommand:
    COMMAND_WORD = "edit"
    MUTATES = True
    MESSAGE_USAGE = (
        f"{COMMAND_WORD}: Edits the details of the member identified by the index number used in "
        f"the displayed member list, or by the member id. "
        f"Existing values will be overwritten by the input values.\n"
        f"Parameters:\n"
        f"Edit by index number: {PREFIX_MEMBER} {PREFIX_INDEX} INDEX (INDEX must be a positive "
        f"integer) {_EDIT_FIELDS}\n"
        f"Edit by member ID: {PREFIX_MEMBER} {PREFIX_ID} ID {_EDIT_FIELDS}\n"
        f"Example:\n"
        f"Edit by index number: {COMMAND_WORD} {PREFIX_MEMBER} {PREFIX_INDEX} 1 "
        f"{PREFIX_PHONE} 91234567 {PREFIX_EMAIL} johndoe@example.com\n"
        f"Edit by member ID: {COMMAND_WORD} {PREFIX_MEMBER} {PREFIX_ID} 10001 "
        f"{PREFIX_PHONE} 91234567 {PREFIX_EMAIL} johndoe@example.com"
    )
    MESSAGE_EDIT_MEMBER_SUCCESS = "Edited Member: {}"
    MESSAGE_NOT_EDITED = "At least one field to edit must be provided."

    target: Locator
    descriptor: EditMemberDescriptor

    def execute(self, book: MemberBook) -> CommandResult:
        member = resolve_member(book, self.target)
        edited = create_edited_member(member, self.descriptor)
        if book.has_member(edited, lambda m: m.id != edited.id):
            raise CommandError(MESSAGE_DUPLICATE_MEMBER)
        book.set_member(member, edited)
        book.update_filtered_member_list(show_all_members)
        log.info("Edited member %s (%s)", edited.id, _locator_text(self.target))
        return CommandResult(self.MESSAGE_EDIT_MEMBER_SUCCESS.format(edited))


# ---------- delete ----------

@dataclass(frozen=True)
class DeleteCommand:
    COMMAND_WORD = "del"
    MUTATES = True
    MESSAGE_USAGE = (
        f"{COMMAND_WORD}: Deletes the member identified by the index number used in the displayed "
        f"member list, or by the member id.\n"
        f"Parameters: {PREFIX_MEMBER} ({PREFIX_INDEX} INDEX | {PREFIX_ID} ID)\n"
        f"Example: {COMMAND_WORD} {PREFIX_MEMBER} {PREFIX_INDEX} 1\n"
        f"Example: {COMMAND_WORD} {PREFIX_MEMBER} {PREFIX_ID} 10001"
    )
    MESSAGE_DELETE_MEMBER_SUCCESS = "Deleted Member: {}"

    target: Locator

    def execute(self, book: MemberBook) -> CommandResult:
        member = resolve_member(book, self.target)
        book.delete_member(member)
        log.info("Deleted member %s", member.id)
        return CommandResult(self.MESSAGE_DELETE_MEMBER_SUCCESS.format(member))


# ---------- find / list ----------

@dataclass(frozen=True)
class MemberMatches:
    """
    Selects members matching any of the given name keywords (whole words,
    case-insensitive), phones, emails (case-insensitive) or ids.
    """
    name_keywords: tuple[str, ...] = ()
    phones: tuple[str, ...] = ()
    emails: tuple[str, ...] = ()
    ids: tuple[str, ...] = ()

    def __call__(self, member: Member) -> bool:
        words = {w.lower() for w in str(member.name).split()}
        if any(k.lower() in words for k in self.name_keywords):
            return True
        if str(member.phone) in self.phones:
            return True
        if str(member.email).lower() in {e.lower() for e in self.emails}:
            return True
        return str(member.id) in self.ids


@dataclass(frozen=True)
class FindCommand:
    COMMAND_WORD = "find"
    MUTATES = False
    MESSAGE_USAGE = (
        f"{COMMAND_WORD}: Finds all members whose names contain any of the specified keywords "
        f"(case-insensitive), or whose phone, email or id is one of the given values, and displays "
        f"them as a list with index numbers.\n"
        f"Parameters: {PREFIX_MEMBER} ({PREFIX_NAME} KEYWORD [MORE_KEYWORDS]... | "
        f"{PREFIX_PHONE} PHONE... | {PREFIX_EMAIL} EMAIL... | {PREFIX_ID} ID...)\n"
        f"Example: {COMMAND_WORD} {PREFIX_MEMBER} {PREFIX_NAME} alice bob charlie"
    )

    predicate: MemberMatches

    def execute(self, book: MemberBook) -> CommandResult:
        book.update_filtered_member_list(self.predicate)
        shown = book.get_updated_member_list()
        return CommandResult(MESSAGE_MEMBERS_LISTED_OVERVIEW.format(len(shown)))


@dataclass(frozen=True)
class ListCommand:
    COMMAND_WORD = "list"
    MUTATES = False
    MESSAGE_USAGE = (
        f"{COMMAND_WORD}: Lists all members.\n"
        f"Example: {COMMAND_WORD} {PREFIX_MEMBER}"
    )
    MESSAGE_SUCCESS = "Listed all members"

    def execute(self, book: MemberBook) -> CommandResult:
        book.update_filtered_member_list(show_all_members)
        return CommandResult(self.MESSAGE_SUCCESS)


@dataclass(frozen=True)
class HelpCommand:
    COMMAND_WORD = "help"
    MUTATES = False
    MESSAGE_USAGE = f"{COMMAND_WORD}: Shows the usage of every command.\nExample: {COMMAND_WORD}"

    def execute(self, book: MemberBook) -> CommandResult:
        return CommandResult("\n\n".join(c.MESSAGE_USAGE for c in ALL_COMMANDS), show_help=True)


ALL_COMMANDS = (
    AddMemberCommand,
    AddTransactionsCommand,
    AddReservationsCommand,
    EditCommand,
    DeleteCommand,
    FindCommand,
    ListCommand,
    HelpCommand,
)

Command = Union[
    AddMemberCommand,
    AddTransactionsCommand,
    AddReservationsCommand,
    EditCommand,
    DeleteCommand,
    FindCommand,
    ListCommand,
    HelpCommand,
]

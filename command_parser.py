"""
command_parser.py
Turns raw command text into command objects.

Input is a command word followed by prefixed arguments, e.g.
    edit -mem -i 1 -p 91234567 -t
A prefix with nothing after it carries the empty string; for tags,
transactions and reservations a single empty value clears the set.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, TypeVar

from commands import (
    AddMemberCommand,
    AddReservationsCommand,
    AddTransactionsCommand,
    Command,
    DeleteCommand,
    EditCommand,
    FindCommand,
    HelpCommand,
    Index,
    ListCommand,
    Locator,
    MemberMatches,
    MESSAGE_INVALID_COMMAND_FORMAT,
    MESSAGE_UNKNOWN_COMMAND,
    PREFIX_ADDRESS,
    PREFIX_EMAIL,
    PREFIX_ID,
    PREFIX_INDEX,
    PREFIX_MEMBER,
    PREFIX_NAME,
    PREFIX_PHONE,
    PREFIX_RESERVATION,
    PREFIX_RESERVATION_MARKER,
    PREFIX_TAG,
    PREFIX_TRANSACTION,
    PREFIX_TRANSACTION_MARKER,
)
from models import (
    Address,
    EditMemberDescriptor,
    Email,
    Id,
    IllegalValueError,
    Name,
    Phone,
    Reservation,
    Tag,
    Transaction,
)

MESSAGE_INVALID_INDEX = "Index is not a non-zero unsigned integer."

F = TypeVar("F")


class ParseError(IllegalValueError):
    """User input does not follow the expected command format."""


def _usage_error(usage: str) -> ParseError:
    return ParseError(MESSAGE_INVALID_COMMAND_FORMAT.format(usage))


# ---------- Tokenizer ----------

@dataclass
class ArgumentMultimap:
    preamble: str = ""
    _values: dict[str, list[str]] = field(default_factory=dict)

    def add(self, prefix: str, value: str) -> None:
        self._values.setdefault(prefix, []).append(value)

    def has(self, prefix: str) -> bool:
        return prefix in self._values

    def get_value(self, prefix: str) -> str | None:
        """Last value given for `prefix`, or None if the prefix is absent."""
        values = self._values.get(prefix)
        return values[-1] if values else None

    def get_all_values(self, prefix: str) -> list[str]:
        return list(self._values.get(prefix, []))


_TOKEN = re.compile(r"\S+")


def tokenize(args: str, *prefixes: str) -> ArgumentMultimap:
    """
    A whitespace-separated token equal to one of `prefixes` starts a new
    argument; the text up to the next prefix, trimmed, is its value. Text
    before the first prefix is the preamble. Spacing inside a value is kept.
    """
    argmap = ArgumentMultimap()
    current: str | None = None
    value_start = 0
    for token in _TOKEN.finditer(args):
        if token.group() not in prefixes:
            continue
        text = args[value_start:token.start()].strip()
        if current is None:
            argmap.preamble = text
        else:
            argmap.add(current, text)
        current, value_start = token.group(), token.end()
    text = args[value_start:].strip()
    if current is None:
        argmap.preamble = text
    else:
        argmap.add(current, text)
    return argmap


# ---------- Field parsers ----------

def parse_field(field_type: type[F], raw: str) -> F:
    try:
        return field_type(raw.strip())
    except IllegalValueError as exc:
        raise ParseError(str(exc)) from exc


def parse_index(raw: str) -> Index:
    trimmed = raw.strip()
    if not trimmed.isdecimal() or int(trimmed) == 0:
        raise ParseError(MESSAGE_INVALID_INDEX)
    return Index.from_one_based(int(trimmed))


def parse_id(raw: str) -> Id:
    return parse_field(Id, raw)


def parse_set(field_type: type[F], raws: Iterable[str]) -> frozenset[F]:
    return frozenset(parse_field(field_type, r) for r in raws)


def parse_set_for_edit(field_type: type[F], raws: list[str]) -> frozenset[F] | None:
    """
    None when the prefix was not given, an empty set when it was given once
    with no value, otherwise every value parsed.
    """
    if not raws:
        return None
    if raws == [""]:
        return frozenset()
    return parse_set(field_type, raws)


def _has_one_locator(argmap: ArgumentMultimap) -> bool:
    return argmap.has(PREFIX_ID) != argmap.has(PREFIX_INDEX)


def parse_locator(argmap: ArgumentMultimap) -> Locator:
    if argmap.has(PREFIX_ID):
        return parse_id(argmap.get_value(PREFIX_ID))
    return parse_index(argmap.get_value(PREFIX_INDEX))


# ---------- Command parsers ----------

def parse_add(args: str) -> Command:
    argmap = tokenize(args, PREFIX_MEMBER, PREFIX_TRANSACTION_MARKER, PREFIX_RESERVATION_MARKER,
                      PREFIX_ID, PREFIX_INDEX, PREFIX_NAME, PREFIX_PHONE, PREFIX_EMAIL,
                      PREFIX_ADDRESS, PREFIX_TAG, PREFIX_TRANSACTION, PREFIX_RESERVATION)
    markers = [p for p in (PREFIX_MEMBER, PREFIX_TRANSACTION_MARKER, PREFIX_RESERVATION_MARKER)
               if argmap.has(p)]
    if markers == [PREFIX_TRANSACTION_MARKER]:
        return _parse_add_transactions(argmap)
    if markers == [PREFIX_RESERVATION_MARKER]:
        return _parse_add_reservations(argmap)

    required = (PREFIX_NAME, PREFIX_PHONE, PREFIX_EMAIL, PREFIX_ADDRESS)
    if markers != [PREFIX_MEMBER] or not all(argmap.has(p) for p in required) or argmap.preamble:
        raise _usage_error(AddMemberCommand.MESSAGE_USAGE)
    return AddMemberCommand(
        name=parse_field(Name, argmap.get_value(PREFIX_NAME)),
        phone=parse_field(Phone, argmap.get_value(PREFIX_PHONE)),
        email=parse_field(Email, argmap.get_value(PREFIX_EMAIL)),
        address=parse_field(Address, argmap.get_value(PREFIX_ADDRESS)),
        tags=parse_set(Tag, argmap.get_all_values(PREFIX_TAG)),
    )


def _parse_add_transactions(argmap: ArgumentMultimap) -> AddTransactionsCommand:
    if not _has_one_locator(argmap) or not argmap.has(PREFIX_TRANSACTION) or argmap.preamble:
        raise _usage_error(AddTransactionsCommand.MESSAGE_USAGE)
    transactions = parse_set(Transaction, argmap.get_all_values(PREFIX_TRANSACTION))
    return AddTransactionsCommand(target=parse_locator(argmap), transactions=transactions)


def _parse_add_reservations(argmap: ArgumentMultimap) -> AddReservationsCommand:
    if not _has_one_locator(argmap) or not argmap.has(PREFIX_RESERVATION) or argmap.preamble:
        raise _usage_error(AddReservationsCommand.MESSAGE_USAGE)
    reservations = parse_set(Reservation, argmap.get_all_values(PREFIX_RESERVATION))
    return AddReservationsCommand(target=parse_locator(argmap), reservations=reservations)


def parse_edit(args: str) -> EditCommand:
    argmap = tokenize(args, PREFIX_MEMBER, PREFIX_ID, PREFIX_INDEX, PREFIX_NAME, PREFIX_PHONE,
                      PREFIX_EMAIL, PREFIX_ADDRESS, PREFIX_TAG, PREFIX_TRANSACTION, PREFIX_RESERVATION)

    # structure is checked before any field value is looked at
    if not argmap.has(PREFIX_MEMBER) or not _has_one_locator(argmap) or argmap.preamble:
        raise _usage_error(EditCommand.MESSAGE_USAGE)

    def optional(field_type, prefix):
        raw = argmap.get_value(prefix)
        return None if raw is None else parse_field(field_type, raw)

    descriptor = EditMemberDescriptor(
        name=optional(Name, PREFIX_NAME),
        phone=optional(Phone, PREFIX_PHONE),
        email=optional(Email, PREFIX_EMAIL),
        address=optional(Address, PREFIX_ADDRESS),
        tags=parse_set_for_edit(Tag, argmap.get_all_values(PREFIX_TAG)),
        transactions=parse_set_for_edit(Transaction, argmap.get_all_values(PREFIX_TRANSACTION)),
        reservations=parse_set_for_edit(Reservation, argmap.get_all_values(PREFIX_RESERVATION)),
    )
    if not descriptor.is_any_field_edited():
        raise ParseError(EditCommand.MESSAGE_NOT_EDITED)

    return EditCommand(target=parse_locator(argmap), descriptor=descriptor)


def parse_delete(args: str) -> DeleteCommand:
    argmap = tokenize(args, PREFIX_MEMBER, PREFIX_ID, PREFIX_INDEX)
    if not argmap.has(PREFIX_MEMBER) or not _has_one_locator(argmap) or argmap.preamble:
        raise _usage_error(DeleteCommand.MESSAGE_USAGE)
    return DeleteCommand(target=parse_locator(argmap))


def parse_find(args: str) -> FindCommand:
    argmap = tokenize(args, PREFIX_MEMBER, PREFIX_NAME, PREFIX_PHONE, PREFIX_EMAIL, PREFIX_ID)

    def words(prefix):
        return tuple(w for v in argmap.get_all_values(prefix) for w in v.split())

    predicate = MemberMatches(
        name_keywords=words(PREFIX_NAME),
        phones=words(PREFIX_PHONE),
        emails=words(PREFIX_EMAIL),
        ids=words(PREFIX_ID),
    )
    if not argmap.has(PREFIX_MEMBER) or argmap.preamble or predicate == MemberMatches():
        raise _usage_error(FindCommand.MESSAGE_USAGE)
    return FindCommand(predicate=predicate)


def parse_list(args: str) -> ListCommand:
    if args.split() not in ([], [PREFIX_MEMBER]):
        raise _usage_error(ListCommand.MESSAGE_USAGE)
    return ListCommand()


_PARSERS = {
    "add": parse_add,
    EditCommand.COMMAND_WORD: parse_edit,
    DeleteCommand.COMMAND_WORD: parse_delete,
    FindCommand.COMMAND_WORD: parse_find,
    ListCommand.COMMAND_WORD: parse_list,
    HelpCommand.COMMAND_WORD: lambda args: HelpCommand(),
}


def parse_command(text: str) -> Command:
    parts = text.split(maxsplit=1)
    if not parts:
        raise _usage_error(HelpCommand.MESSAGE_USAGE)
    command_word = parts[0]
    args = parts[1] if len(parts) > 1 else ""
    parser = _PARSERS.get(command_word)
    if parser is None:
        raise ParseError(MESSAGE_UNKNOWN_COMMAND)
    return parser(args)

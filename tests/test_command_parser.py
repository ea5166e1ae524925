"""Tests for tokenizing and parsing command text."""

from __future__ import annotations

import pytest

from command_parser import (
    MESSAGE_INVALID_INDEX,
    ParseError,
    parse_command,
    parse_edit,
    tokenize,
)
from commands import (
    AddMemberCommand,
    AddReservationsCommand,
    AddTransactionsCommand,
    DeleteCommand,
    EditCommand,
    FindCommand,
    HelpCommand,
    Index,
    ListCommand,
    MemberMatches,
    MESSAGE_INVALID_COMMAND_FORMAT,
    MESSAGE_UNKNOWN_COMMAND,
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

EDIT_USAGE_ERROR = MESSAGE_INVALID_COMMAND_FORMAT.format(EditCommand.MESSAGE_USAGE)


def test_tokenize_splits_on_known_prefixes() -> None:
    argmap = tokenize("some preamble -n Alex  Yeoh -t friends -t -x 1", "-n", "-t")

    assert argmap.preamble == "some preamble"
    assert argmap.get_value("-n") == "Alex  Yeoh"
    assert argmap.get_all_values("-t") == ["friends", "-x 1"]
    assert argmap.get_value("-p") is None
    assert not argmap.has("-p")


def test_tokenize_prefix_without_value_is_empty_string() -> None:
    argmap = tokenize("-mem -i 1 -t", "-mem", "-i", "-t")

    assert argmap.get_value("-mem") == ""
    assert argmap.get_all_values("-t") == [""]
    assert argmap.preamble == ""


def test_tokenize_keeps_spacing_inside_values() -> None:
    argmap = tokenize("  -a Blk 5,   #01-02\t -n  Amy ", "-a", "-n")

    assert argmap.get_value("-a") == "Blk 5,   #01-02"
    assert argmap.get_value("-n") == "Amy"
    assert argmap.preamble == ""


def test_tokenize_prefix_must_be_a_whole_token() -> None:
    argmap = tokenize("-a 12 a-n road -n Amy", "-a", "-n")
    assert argmap.get_value("-a") == "12 a-n road"


def test_tokenize_does_not_confuse_similar_prefixes() -> None:
    argmap = tokenize("-id 10001", "-i", "-id")
    assert argmap.get_value("-id") == "10001"
    assert not argmap.has("-i")


# ---------- edit ----------

def test_parse_edit_by_index() -> None:
    command = parse_edit("-mem -i 1 -p 99998888")

    assert command == EditCommand(
        target=Index.from_one_based(1),
        descriptor=EditMemberDescriptor(phone=Phone("99998888")),
    )


def test_parse_edit_by_id_with_every_field() -> None:
    command = parse_edit(
        "-mem -id 10002 -n Amy Bee -p 11111111 -e amy@example.com -a Block 312, Amy Street 1 "
        "-t friend -t husband -b 12.50 -b 3 -r 2021-12-24 19:30, 4 people"
    )

    assert command.target == Id("10002")
    assert command.descriptor == EditMemberDescriptor(
        name=Name("Amy Bee"),
        phone=Phone("11111111"),
        email=Email("amy@example.com"),
        address=Address("Block 312, Amy Street 1"),
        tags=frozenset({Tag("friend"), Tag("husband")}),
        transactions=frozenset({Transaction("12.50"), Transaction("3")}),
        reservations=frozenset({Reservation("2021-12-24 19:30, 4 people")}),
    )


def test_parse_edit_keeps_address_spacing() -> None:
    command = parse_edit("-mem -i 1 -a Blk 5,   #01-02")
    assert command.descriptor.address == Address("Blk 5,   #01-02")


def test_parse_edit_ignores_text_after_member_marker() -> None:
    assert parse_edit("-mem extra -i 1 -p 99998888") == parse_edit("-mem -i 1 -p 99998888")


def test_parse_edit_repeated_values_collapse() -> None:
    command = parse_edit("-mem -i 2 -t friends -t friends -b 5 -b 5")

    assert command.descriptor.tags == {Tag("friends")}
    assert command.descriptor.transactions == {Transaction("5")}


def test_parse_edit_empty_value_clears_set() -> None:
    command = parse_edit("-mem -i 1 -t -b")

    assert command.descriptor.tags == frozenset()
    assert command.descriptor.transactions == frozenset()
    assert command.descriptor.reservations is None
    assert command.descriptor.name is None


def test_parse_edit_empty_value_among_others_is_invalid() -> None:
    with pytest.raises(ParseError, match=Tag.MESSAGE_CONSTRAINTS):
        parse_edit("-mem -i 1 -t friends -t")


@pytest.mark.parametrize("locator", ["-i 1", "-i 0", "-i abc", "-id 10001", "-id bad"])
def test_parse_edit_nothing_to_edit(locator) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_edit(f"-mem {locator}")
    assert str(exc_info.value) == EditCommand.MESSAGE_NOT_EDITED


@pytest.mark.parametrize(
    "args",
    [
        "",
        "-i 1 -p 99998888",  # no member marker
        "-mem -p 99998888",  # no locator
        "-mem -i 1 -id 10001 -p 99998888",  # both locators
        "-mem -i 1 -id 10001 -p not-a-phone",  # both locators, invalid field not reached
        "1 -mem -i 1 -p 99998888",  # preamble
    ],
)
def test_parse_edit_structure_errors(args) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_edit(args)
    assert str(exc_info.value) == EDIT_USAGE_ERROR


@pytest.mark.parametrize(
    ("args", "message"),
    [
        ("-mem -i 1 -n R@chel", Name.MESSAGE_CONSTRAINTS),
        ("-mem -i 1 -p +651234", Phone.MESSAGE_CONSTRAINTS),
        ("-mem -i 1 -e example.com", Email.MESSAGE_CONSTRAINTS),
        ("-mem -i 1 -a", Address.MESSAGE_CONSTRAINTS),
        ("-mem -i 1 -t #friend", Tag.MESSAGE_CONSTRAINTS),
        ("-mem -i 1 -b -5", Transaction.MESSAGE_CONSTRAINTS),
        ("-mem -i 1 -r tomorrow", Reservation.MESSAGE_CONSTRAINTS),
        ("-mem -id 3$001 -p 99998888", Id.MESSAGE_CONSTRAINTS),
        ("-mem -i 0 -p 99998888", MESSAGE_INVALID_INDEX),
        ("-mem -i -3 -p 99998888", MESSAGE_INVALID_INDEX),
    ],
)
def test_parse_edit_field_errors(args, message) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_edit(args)
    assert str(exc_info.value) == message


def test_parse_error_is_an_illegal_value_error() -> None:
    with pytest.raises(IllegalValueError):
        parse_edit("-mem -i 1 -p +651234")


# ---------- other commands ----------

def test_parse_add_member() -> None:
    command = parse_command(
        "add -mem -n John Doe -p 98765432 -e johnd@example.com -a 311, Clementi Ave 2 -t friends"
    )

    assert command == AddMemberCommand(
        name=Name("John Doe"),
        phone=Phone("98765432"),
        email=Email("johnd@example.com"),
        address=Address("311, Clementi Ave 2"),
        tags=frozenset({Tag("friends")}),
    )


@pytest.mark.parametrize(
    "text",
    [
        "add -mem -n John Doe -p 98765432 -e johnd@example.com",  # no address
        "add -n John Doe -p 98765432 -e johnd@example.com -a street",  # no marker
        "add -mem -txn -n John Doe -p 98765432 -e johnd@example.com -a street",  # two markers
    ],
)
def test_parse_add_member_usage_errors(text) -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_command(text)
    assert str(exc_info.value) == MESSAGE_INVALID_COMMAND_FORMAT.format(AddMemberCommand.MESSAGE_USAGE)


def test_parse_add_transactions() -> None:
    command = parse_command("add -txn -id 10001 -b 23.50 -b 8")

    assert command == AddTransactionsCommand(
        target=Id("10001"),
        transactions=frozenset({Transaction("23.50"), Transaction("8")}),
    )


def test_parse_add_transactions_needs_amount() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_command("add -txn -i 1")
    assert str(exc_info.value) == MESSAGE_INVALID_COMMAND_FORMAT.format(AddTransactionsCommand.MESSAGE_USAGE)


def test_parse_add_reservations() -> None:
    command = parse_command("add -rs -i 2 -r 2021-12-24 19:30, 4 people")

    assert command == AddReservationsCommand(
        target=Index(1),
        reservations=frozenset({Reservation("2021-12-24 19:30, 4 people")}),
    )


def test_parse_delete() -> None:
    assert parse_command("del -mem -i 3") == DeleteCommand(target=Index(2))
    assert parse_command("del -mem -id 10004") == DeleteCommand(target=Id("10004"))

    with pytest.raises(ParseError) as exc_info:
        parse_command("del -mem -i 3 -id 10004")
    assert str(exc_info.value) == MESSAGE_INVALID_COMMAND_FORMAT.format(DeleteCommand.MESSAGE_USAGE)


def test_parse_find() -> None:
    command = parse_command("find -mem -n alice  bob -p 98765432")

    assert command == FindCommand(MemberMatches(name_keywords=("alice", "bob"), phones=("98765432",)))


def test_parse_find_without_criteria() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_command("find -mem")
    assert str(exc_info.value) == MESSAGE_INVALID_COMMAND_FORMAT.format(FindCommand.MESSAGE_USAGE)


def test_parse_list_and_help() -> None:
    assert parse_command("list -mem") == ListCommand()
    assert parse_command("list") == ListCommand()
    assert parse_command("help me please") == HelpCommand()
    with pytest.raises(ParseError):
        parse_command("list everything")


def test_parse_unknown_and_empty_commands() -> None:
    with pytest.raises(ParseError) as exc_info:
        parse_command("launch -mem")
    assert str(exc_info.value) == MESSAGE_UNKNOWN_COMMAND

    with pytest.raises(ParseError) as exc_info:
        parse_command("   ")
    assert str(exc_info.value) == MESSAGE_INVALID_COMMAND_FORMAT.format(HelpCommand.MESSAGE_USAGE)

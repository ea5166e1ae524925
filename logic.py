"""
logic.py
Runs one command end to end: parse, execute against the MemberBook, save.
"""

from __future__ import annotations

import logging
from pathlib import Path

import storage
from command_parser import ParseError, parse_command
from commands import CommandError, CommandResult
from member_book import MemberBook
from models import Member

log = logging.getLogger("ezfoodie.logic")

FILE_OPS_ERROR_MESSAGE = "Could not save data to file: {}"


class Logic:
    def __init__(self, book: MemberBook, data_file: Path):
        self.book = book
        self.data_file = data_file

    @classmethod
    def from_file(cls, data_file: Path) -> Logic:
        """
        Load the book from `data_file`. Unreadable data is logged and replaced
        by an empty book; the bad file is only overwritten by the next save.
        """
        try:
            members = storage.read_members(data_file)
        except storage.DataLoadingError as exc:
            log.warning("%s. Starting with an empty member list.", exc)
            members = []
        return cls(MemberBook(members), data_file)

    def execute(self, command_text: str) -> CommandResult:
        """
        Raises ParseError for malformed input and CommandError when the command
        cannot be applied or saved; in every case the book is left as it was.
        """
        log.info("----------------[USER COMMAND][%s]", command_text)
        before = self.book.snapshot()
        try:
            command = parse_command(command_text)
            result = command.execute(self.book)
        except (ParseError, CommandError) as exc:
            log.warning("Command failed: %s", exc)
            raise

        if command.MUTATES:
            self.save(rollback=before)
        return result

    def save(self, rollback: tuple | None = None) -> None:
        """
        Write the whole book. If the write fails and `rollback` holds a
        MemberBook.snapshot(), the book is put back to that state.
        """
        try:
            storage.save_members(self.book.members, self.data_file)
        except OSError as exc:
            log.error("Saving to %s failed: %s", self.data_file, exc)
            if rollback is not None:
                self.book.restore(rollback)
            raise CommandError(FILE_OPS_ERROR_MESSAGE.format(exc)) from exc

    def replace_members(self, members: list[Member]) -> None:
        before = self.book.snapshot()
        self.book.reset(members)
        self.save(rollback=before)

    def get_updated_member_list(self) -> list[Member]:
        return self.book.get_updated_member_list()

"""
Interactive Console Driver

A thin text menu over AccountBook:

1) Print number of live accounts
2) Create an account from two balances
3) Try to update an existing account
4) List all accounts
5) Quit

Balances are entered as two whitespace-separated numbers
("available present"). Malformed input is reported and the menu
continues; it never reaches the account rules.
"""

import argparse
import sys
from decimal import Decimal
from typing import Callable, Optional

from bank_account.audit import configure_logging
from bank_account.config import get_settings
from bank_account.models.account import (
    MIN_AVAILABLE_BALANCE,
    MIN_PRESENT_BALANCE,
    InvalidAmountError,
    to_amount,
)
from bank_account.orchestrator import AccountBook, AccountBookError, create_app_components


MENU = (
    "\n=== Bank Account Test Menu ===\n"
    "1) Print number of BankAccount objects in memory\n"
    "2) Create an account (you choose values)\n"
    "3) Try to update an existing account (test exceptions)\n"
    "4) List all accounts\n"
    "5) Quit"
)

OPTION_COUNT = "1"
OPTION_CREATE = "2"
OPTION_UPDATE = "3"
OPTION_LIST = "4"
OPTION_QUIT = "5"


class InvalidInputError(ValueError):
    """Console input that could not be parsed."""


def parse_balances(line: str) -> tuple[Decimal, Decimal]:
    """
    Parse "available present".

    Raises:
        InvalidInputError: Unless the line holds exactly two numbers
    """
    parts = line.split()
    if len(parts) != 2:
        raise InvalidInputError("expected two numbers: available present")
    try:
        return to_amount(parts[0]), to_amount(parts[1])
    except InvalidAmountError as e:
        raise InvalidInputError(str(e)) from e


def parse_index(line: str) -> int:
    text = line.strip()
    try:
        return int(text)
    except ValueError:
        raise InvalidInputError(f"Not an index: {text!r}") from None


class ConsoleSession:
    """
    One interactive session over an AccountBook.

    `input_fn` and `output` default to input() and print(); tests pass
    scripted replacements.
    """

    def __init__(
        self,
        book: AccountBook,
        input_fn: Optional[Callable[[str], str]] = None,
        output: Optional[Callable[[str], None]] = None,
        currency_symbol: str = "$",
    ):
        self._book = book
        self._input = input_fn or input
        self._output = output or print
        self._symbol = currency_symbol

    @property
    def book(self) -> AccountBook:
        return self._book

    def _describe(self, account) -> str:
        return account.describe(currency_symbol=self._symbol)

    def _ask(self, prompt: str) -> str:
        return self._input(prompt)

    def _ask_balances(self, prompt: str) -> tuple[Decimal, Decimal]:
        line = self._ask(prompt)
        try:
            return parse_balances(line)
        except InvalidInputError as e:
            self._book.audit_logger.log_input_rejected(prompt.strip(), str(e))
            raise

    # -------------------------------------------------------------------------
    # Menu actions
    # -------------------------------------------------------------------------

    def show_count(self) -> None:
        self._output(f"Objects currently in memory: {self._book.live_count}")

    def create_account(self) -> None:
        available, present = self._ask_balances(
            "Enter available and present balances: "
        )

        self._output(f"Count before create: {self._book.live_count}")
        account = self._book.create_account(available, present)
        if account.creation_rejection is not None:
            self._output(
                f"[Create] {account.creation_rejection.message} -> account set to "
                f"defaults ({self._symbol}{MIN_AVAILABLE_BALANCE:.2f}, "
                f"{self._symbol}{MIN_PRESENT_BALANCE:.2f})"
            )
        self._output(f"Created: {self._describe(account)}")
        self._output(f"Count after create: {self._book.live_count}")

    def update_account(self) -> None:
        if self._book.is_empty:
            self._output("No accounts yet. Create one first (option 2).")
            return

        last = len(self._book) - 1
        index = parse_index(self._ask(f"Choose account index [0..{last}]: "))
        if not 0 <= index <= last:
            self._output("Invalid index.")
            return

        available, present = self._ask_balances(
            "Enter NEW available and present balances: "
        )

        account = self._book.get_account(index)
        self._output(f"Before update: {self._describe(account)}")

        result = self._book.update_account(index, available, present)
        if result.ok:
            self._output(f"Update OK. After update: {self._describe(account)}")
        else:
            self._output(
                f"[Update blocked] {result.message} -> object left unchanged."
            )
            self._output(f"After failed update: {self._describe(account)}")

    def list_accounts(self) -> None:
        if self._book.is_empty:
            self._output("(no accounts)")
            return
        for index, account in self._book.list_accounts():
            self._output(f"{index}: {self._describe(account)}")

    # -------------------------------------------------------------------------
    # Loop
    # -------------------------------------------------------------------------

    def run(self) -> int:
        """
        Run the menu until Quit or end of input.

        Returns the process exit code.
        """
        actions = {
            OPTION_COUNT: self.show_count,
            OPTION_CREATE: self.create_account,
            OPTION_UPDATE: self.update_account,
            OPTION_LIST: self.list_accounts,
        }

        self._book.audit_logger.log_session_started()
        try:
            while True:
                self._output(MENU)
                try:
                    choice = self._ask("Select: ").strip()
                except (EOFError, KeyboardInterrupt):
                    self._output("")
                    break

                if choice == OPTION_QUIT:
                    break

                action = actions.get(choice)
                if action is None:
                    self._output("Unknown option.")
                    continue

                try:
                    action()
                except (EOFError, KeyboardInterrupt):
                    self._output("")
                    break
                except (InvalidInputError, AccountBookError) as e:
                    self._output(f"Invalid input: {e}")
        finally:
            self._book.audit_logger.log_session_ended(live_count=self._book.live_count)
            self._book.close()

        self._output("Goodbye!")
        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bank-account",
        description="Interactive bank account validation console",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level to stderr",
    )
    parser.add_argument(
        "--json-logs",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Render structured logs as JSON (default from settings)",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()

    level = "DEBUG" if args.debug or settings.app.debug_mode else settings.logging.level
    json_output = settings.logging.json_output if args.json_logs is None else args.json_logs
    configure_logging(level=level, json_output=json_output)

    book = create_app_components(settings)
    session = ConsoleSession(book, currency_symbol=settings.app.currency_symbol)
    return session.run()


if __name__ == "__main__":
    sys.exit(main())

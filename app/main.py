"""
Terminal Front End for Finance Ledger

The numbered-menu loop users interact with.

DESIGN PRINCIPLES:
1. Every command maps to exactly one session call
2. Bad input re-prompts, it never ends the session
3. Nothing is printed by the engine; all text comes from the formatter
4. Exiting always saves

Input and output functions are injectable so the whole loop can be
driven from a script in tests.
"""

from typing import Callable, Optional

from ledger.engine import InvalidAmount, parse_amount
from ledger.models.account import UserAccount
from ledger.orchestrator import AuthFlow, Command, LedgerSession, create_app_components
from ledger.presentation import (
    format_category_list,
    format_category_statistics,
    format_outcome,
    format_overall_stats,
)


InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]

MENU = """
Menu:
1. Add income
2. Add expense
3. Set (or change) a category budget
4. List categories
5. Show overall statistics (income/expenses/balance)
6. Show category statistics
7. Transfer funds to another user
8. Exit (saves your data)"""


class TerminalApp:
    """Drives one login and one session over a text console."""

    def __init__(
        self,
        auth_flow: AuthFlow,
        input_fn: InputFn = input,
        output_fn: OutputFn = print,
    ):
        self._auth = auth_flow
        self._input = input_fn
        self._output = output_fn

    def _ask(self, prompt: str) -> str:
        return self._input(prompt).strip()

    def _ask_amount(self, prompt: str):
        """Re-prompt until the user types a number."""
        while True:
            raw = self._ask(prompt)
            try:
                return parse_amount(raw)
            except InvalidAmount:
                self._output("Please enter a valid number.")

    def authenticate(self) -> Optional[UserAccount]:
        """
        Log in, or offer registration for an unknown login.

        Returns:
            The account, or None if login failed or registration was declined
        """
        login = self._ask("Login: ")
        password = self._ask("Password: ")

        if not self._auth.account_exists(login):
            answer = self._ask("User not found. Register a new account (y/n)? ")
            if answer.lower() != "y":
                return None
            account, message = self._auth.register(login, password)
        else:
            account, message = self._auth.login(login, password)

        self._output(message)
        return account

    def dispatch(self, session: LedgerSession, command: Command) -> bool:
        """
        Run one command.

        Returns:
            False when the session should end
        """
        if command == Command.ADD_INCOME:
            description = self._ask("Income description (e.g. Salary): ")
            amount = self._ask_amount("Amount: ")
            self._output(format_outcome(session.add_income(description, amount)))

        elif command == Command.ADD_EXPENSE:
            description = self._ask("Expense description (e.g. Groceries): ")
            amount = self._ask_amount("Amount: ")
            category = self._ask("Category (e.g. Food, Taxi): ")
            self._output(format_outcome(
                session.add_expense(description, amount, category)
            ))

        elif command == Command.SET_CATEGORY_BUDGET:
            category = self._ask("Category name: ")
            limit = self._ask_amount("New limit (non-negative number): ")
            self._output(format_outcome(session.set_category_budget(category, limit)))

        elif command == Command.LIST_CATEGORIES:
            self._output(format_category_list(session.list_categories()))

        elif command == Command.SHOW_OVERALL_STATS:
            self._output(format_overall_stats(session.overall_statistics()))

        elif command == Command.SHOW_CATEGORY_STATS:
            self._output(format_category_statistics(session.category_statistics()))

        elif command == Command.TRANSFER_FUNDS:
            recipient = self._ask("Recipient login: ")
            description = self._ask("Transfer description (e.g. Gift): ")
            amount = self._ask_amount("Amount: ")
            self._output(format_outcome(
                session.transfer_funds(recipient, description, amount)
            ))

        elif command == Command.EXIT:
            self._output(format_outcome(session.close()))
            return False

        else:
            self._output("Unknown command. Please try again.")

        return True

    def run(self) -> int:
        """
        Main loop.

        Returns:
            Process exit code
        """
        self._output("Welcome to Finance Ledger!")

        account = self.authenticate()
        if account is None:
            self._output("Authentication failed. Exiting.")
            return 1

        session = self._auth.open_session(account)
        running = True
        while running:
            self._output(MENU)
            try:
                choice = self._ask("Enter a command number: ")
            except EOFError:
                # Input closed: save and leave like an explicit exit
                choice = Command.EXIT.value
            running = self.dispatch(session, Command.from_code(choice))

        return 0


def main() -> int:
    """Console entry point."""
    auth_flow = create_app_components(use_files=True)
    return TerminalApp(auth_flow).run()


if __name__ == "__main__":
    raise SystemExit(main())

"""Command-line management of users: create, list, update and delete."""

from __future__ import annotations

import secrets
import sqlite3
import sys
from typing import TextIO

from placelog.db import connect
from placelog.storage import Storage

_MENU = """
--- User Manager Interactive Menu ---
1. List Users
2. Create User
3. Update User
4. Delete User
5. Or q to Exit"""

_USAGE = """
Usage:
  manage-user                (Interactive mode)
  manage-user list           (List all users)
  manage-user create <name>  (Create new user)
  manage-user update <id> <new_name>
  manage-user delete <id>"""


def generate_id() -> str:
    """A random 16-character hexadecimal user id."""
    return secrets.token_hex(8)


class UserManager:
    """Reads commands and answers from *stdin* and reports to *stdout*."""

    def __init__(self, storage: Storage, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self.storage = storage
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout

    def _say(self, text: str = "") -> None:
        print(text, file=self.stdout)

    def _prompt(self, message: str) -> str | None:
        """Ask for a line; None once input is exhausted."""
        self.stdout.write(message)
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            return None
        return line.strip()

    def _ask(self, message: str) -> str:
        return self._prompt(message) or ""

    def create(self, name: str) -> str | None:
        """Create a user called *name* and return the new id, or None on failure."""
        if not name:
            self._say("Error: Name cannot be empty.")
            return None
        user_id = generate_id()
        try:
            self.storage.create_user(user_id, name)
        except sqlite3.Error as exc:
            self._say(f"Failed to create user: {exc}")
            return None
        self._say(f"User created successfully!\nID: {user_id}\nName: {name}")
        return user_id

    def list_users(self) -> None:
        try:
            users = self.storage.all_users()
        except sqlite3.Error as exc:
            self._say(f"Failed to list users: {exc}")
            return
        self._say("\nID               | Name")
        self._say("-----------------|-----------------")
        for user in users:
            self._say(f"{user.id} | {user.name}")

    def update(self, user_id: str, name: str) -> bool:
        """Rename a user; True if the change was made."""
        if not user_id or not name:
            self._say("Error: ID and Name are required for update.")
            return False
        if not self.storage.user_exists(user_id):
            self._say(f"Error: User with ID {user_id} not found.")
            return False
        try:
            self.storage.update_user(user_id, name)
        except sqlite3.Error as exc:
            self._say(f"Failed to update user: {exc}")
            return False
        self._say("User updated successfully.")
        return True

    def delete(self, user_id: str) -> bool:
        """Delete a user and their events; True if the user was removed."""
        if not user_id:
            self._say("Error: User ID required for deletion.")
            return False
        if not self.storage.user_exists(user_id):
            self._say(f"Error: User with ID {user_id} not found.")
            return False
        try:
            self.storage.delete_user(user_id)
        except sqlite3.Error as exc:
            self._say(f"Failed to delete user: {exc}")
            return False
        self._say("User and all associated events deleted successfully.")
        return True

    def interactive(self) -> None:
        """Offer the menu until the user quits or input runs out."""
        while True:
            self._say(_MENU)
            choice = self._prompt("Select an option (1-5): ")
            if choice is None or choice in ("q", "5"):
                self._say("Goodbye!")
                return
            if choice == "1":
                self.list_users()
            elif choice == "2":
                self.create(self._ask("Enter user name: "))
            elif choice == "3":
                user_id = self._ask("Enter User ID to update: ")
                name = self._ask("Enter new name: ")
                self.update(user_id, name)
            elif choice == "4":
                user_id = self._ask("Enter User ID to delete: ")
                confirm = self._ask(
                    f"Are you sure you want to delete user {user_id} and all their events? (y/N): "
                )
                if confirm.lower() == "y":
                    self.delete(user_id)
                else:
                    self._say("Deletion cancelled.")
            else:
                self._say("Invalid choice, please try again.")

    def run(self, args: list[str]) -> None:
        """Carry out the command in *args*, or the interactive menu when there is none."""
        if not args:
            self.interactive()
            return
        command, rest = args[0], args[1:]
        if command == "create":
            name = " ".join(rest) if rest else self._ask("Enter user name: ")
            self.create(name)
        elif command == "list":
            self.list_users()
        elif command == "update":
            user_id = rest[0] if rest else self._ask("Enter User ID to update: ")
            name = " ".join(rest[1:]) if len(rest) > 1 else self._ask("Enter new name: ")
            self.update(user_id, name)
        elif command == "delete":
            user_id = rest[0] if rest else self._ask("Enter User ID to delete: ")
            self.delete(user_id)
        else:
            self._say(f"Unknown command: {command}")
            self._say(_USAGE)


def main(argv: list[str] | None = None) -> None:
    """Manage users; a leading '--db PATH' selects the database file."""
    args = list(sys.argv[1:] if argv is None else argv)
    db_path = "events.db"
    if len(args) >= 2 and args[0] == "--db":
        db_path, args = args[1], args[2:]
    conn = connect(db_path)
    try:
        UserManager(Storage(conn)).run(args)
    finally:
        conn.close()
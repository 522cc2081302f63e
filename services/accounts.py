"""Credential store: registration, login checks and admin seeding."""

from __future__ import annotations

import json
from pathlib import Path

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from models.user import User
from notifications.abstract_notifier import Notifier
from notifications.dispatcher import NotificationDispatcher
from utils.errors import DuplicateEmail, InvalidCredentials, ValidationError


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


class AccountService:
    """Reads and writes ``User`` rows through an explicit session."""

    def __init__(
        self,
        session: Session,
        notifier: Notifier | None = None,
        dispatcher: NotificationDispatcher | None = None,
    ):
        self.session = session
        self.notifier = notifier
        self.dispatcher = dispatcher

    def find_by_email(self, email: str) -> User | None:
        normalized = normalize_email(email)
        if not normalized:
            return None
        return (
            self.session.query(User)
            .filter(func.lower(User.email) == normalized)
            .first()
        )

    def register(self, email: str | None, password: str | None) -> User:
        """Create a regular user. Raises ``DuplicateEmail`` when taken."""

        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required.")

        if self.find_by_email(email) is not None:
            raise DuplicateEmail()

        user = User(email=email, is_admin=False)
        user.set_password(password)
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            # Concurrent registration won the unique index.
            self.session.rollback()
            raise DuplicateEmail() from exc

        current_app.logger.info("Registered user %s", user.id)
        self._notify_welcome(user.email)
        return user

    def _notify_welcome(self, email: str) -> None:
        if not current_app.config.get("MAILER_ENABLED"):
            return
        if self.notifier is None or self.dispatcher is None:
            return
        self.dispatcher.submit(self.notifier.notify_welcome, email, label="welcome email")

    def verify(self, email: str | None, password: str | None) -> User:
        """Return the matching user or raise ``InvalidCredentials``.

        Unknown emails and wrong passwords are indistinguishable to callers.
        """

        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = self.find_by_email(email)
        if user is None or not user.check_password(password):
            raise InvalidCredentials()
        return user

    def seed_admin(self, email: str | None, password: str | None) -> tuple[User, bool]:
        """Create or update an administrator. Returns ``(user, created)``."""

        email = normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required.")

        user = self.find_by_email(email)
        created = user is None
        if created:
            user = User(email=email)
            self.session.add(user)
        user.is_admin = True
        user.set_password(password)
        self.session.commit()
        return user, created

    def seed_admins_from_file(self, path: str | Path) -> int:
        """Seed every ``{email, password}`` entry of a JSON file.

        Returns the number of accounts created or updated.
        """

        seed_path = Path(path)
        if not seed_path.exists():
            current_app.logger.info("%s not found: skipping admin seed.", seed_path)
            return 0

        try:
            entries = json.loads(seed_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            current_app.logger.error("Invalid admin seed file %s: %s", seed_path, exc)
            return 0
        if not isinstance(entries, list):
            current_app.logger.error("Admin seed file %s must contain a list.", seed_path)
            return 0

        seeded = 0
        for entry in entries:
            if not isinstance(entry, dict):
                continue
            email = normalize_email(str(entry.get("email") or ""))
            password = str(entry.get("password") or "")
            if not email or not password:
                continue
            try:
                self.seed_admin(email, password)
            except SQLAlchemyError:
                self.session.rollback()
                current_app.logger.exception("Error seeding admin %s", email)
                continue
            seeded += 1

        current_app.logger.info("Admins seeded/updated: %d", seeded)
        return seeded

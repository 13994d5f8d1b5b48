"""Idempotent database seed helpers for local development environments."""

from __future__ import annotations

import logging
from typing import cast

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import select
from sqlalchemy.orm import Session

from ficom.models.user import User
from ficom.services._shared.clock import floor_to_second, utcnow
from ficom.services.credentials import DEFAULT_ROUNDS, CredentialHasher

LOGGER = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

USER_FIXTURES: list[dict[str, str]] = [
    {"email": "admin@example.com", "name": "Admin Taro"},
    {"email": "tester1@example.com", "name": "Tester Hanako"},
    {"email": "developer@example.com", "name": "Developer Jiro"},
    {"email": "reviewer@example.com", "name": "Reviewer Saburo"},
    {"email": "qa@example.com", "name": "QA Shiro"},
    {"email": "manager@example.com", "name": "Manager Goro"},
    {"email": "engineer@example.com", "name": "Engineer Rokuro"},
    {"email": "analyst@example.com", "name": "Analyst Nanako"},
]


def _session(database: SQLAlchemy) -> Session:
    """Return the current SQLAlchemy session."""
    return cast(Session, database.session)


def _touch(summary: dict[str, dict[str, int]], table: str, created: bool) -> None:
    """Update summary counters for the given table."""
    entry = summary.setdefault(table, {"created": 0, "existing": 0})
    if created:
        entry["created"] += 1
    else:
        entry["existing"] += 1


def seed_users(
    database: SQLAlchemy,
    *,
    rounds: int = DEFAULT_ROUNDS,
    verbose: bool = False,
) -> dict[str, dict[str, int]]:
    """Create the demo accounts, all sharing :data:`DEMO_PASSWORD`.

    Existing accounts are left untouched, so the command never resets a
    password that was changed locally.
    """
    if verbose:
        LOGGER.info("Seeding demo users...")
    session = _session(database)
    hasher = CredentialHasher(rounds=rounds)
    # One hash for every account, as the demo data shares a password
    password_hash = hasher.hash(DEMO_PASSWORD)
    summary: dict[str, dict[str, int]] = {}

    for fixture in USER_FIXTURES:
        email = fixture["email"]
        user = session.execute(select(User).filter_by(email=email)).scalar_one_or_none()
        created = user is None
        if created:
            session.add(
                User(
                    email=email,
                    name=fixture["name"],
                    password_hash=password_hash,
                    tokens_valid_from=floor_to_second(utcnow()),
                )
            )
        if verbose:
            LOGGER.debug("seed.user email=%s created=%s", email, created)
        _touch(summary, "users", created)

    session.commit()
    return summary


def run_all(
    database: SQLAlchemy,
    *,
    rounds: int = DEFAULT_ROUNDS,
    verbose: bool = False,
) -> dict[str, dict[str, int]]:
    """Run all seeders in foreign-key order."""
    if verbose:
        LOGGER.info("Running full seed pipeline...")
    return seed_users(database, rounds=rounds, verbose=verbose)


__all__ = ["DEMO_PASSWORD", "USER_FIXTURES", "run_all", "seed_users"]

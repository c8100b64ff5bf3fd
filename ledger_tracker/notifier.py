# ledger_tracker/notifier.py
from __future__ import annotations

import logging
from typing import Protocol

import click

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Receives human-readable outcomes of store mutations."""

    def success(self, title: str, message: str) -> None:
        ...

    def failure(self, title: str, message: str) -> None:
        ...


class NullNotifier:
    def success(self, title: str, message: str) -> None:
        return

    def failure(self, title: str, message: str) -> None:
        return


class LoggingNotifier:
    def success(self, title: str, message: str) -> None:
        logger.info("%s %s", title, message)

    def failure(self, title: str, message: str) -> None:
        logger.warning("%s %s", title, message)


class EchoNotifier:
    """Prints notifications to the terminal; failures go to stderr."""

    def success(self, title: str, message: str) -> None:
        click.echo(f"{title} {message}")

    def failure(self, title: str, message: str) -> None:
        click.echo(f"⚠️  {title} {message}", err=True)


NOTIFIERS = {
    "echo": EchoNotifier,
    "log": LoggingNotifier,
    "none": NullNotifier,
}


def get_notifier(name):
    """Build the notifier configured under ``notifier`` (echo, log or none)."""
    try:
        return NOTIFIERS[name]()
    except KeyError:
        raise ValueError(
            f"Unsupported notifier '{name}'. Expected one of {', '.join(NOTIFIERS)}."
        )

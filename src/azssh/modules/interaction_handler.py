"""User interaction abstraction for CLI and testing.

This module provides a protocol-based approach to user interaction, allowing
different implementations for the CLI (using click) and for tests (scripted
responses).

Every menu in azssh (subscription, resource group, VM, SSH client) goes
through select(). Items carry their own display label, so the handler never
needs to know what kind of payload it is choosing between.

Example:
    >>> handler = CLIInteractionHandler()
    >>> items = SelectableItem.from_values(["rg-dev", "rg-prod"], label=str)
    >>> chosen = handler.select("Select resource group:", items)
    >>> chosen.value
    'rg-prod'

    Testing example:
    >>> test_handler = MockInteractionHandler(choice_responses=[1])
    >>> test_handler.select("Select:", items).value
    'rg-prod'
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Generic, Protocol, TypeVar, runtime_checkable

import click

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SelectableItem(Generic[T]):
    """A menu entry: what the user sees and what the caller gets back."""

    label: str
    value: T

    @classmethod
    def from_values(
        cls, values: Iterable[T], label: Callable[[T], str]
    ) -> list["SelectableItem[T]"]:
        """Wrap payloads using a label-extraction function."""
        return [cls(label=label(value), value=value) for value in values]


@runtime_checkable
class InteractionHandler(Protocol):
    """Protocol for user interaction."""

    def select(self, title: str, items: Sequence[SelectableItem[T]]) -> SelectableItem[T]:
        """Prompt user to select one item from a numbered list.

        Args:
            title: Heading displayed above the list
            items: Non-empty ordered items

        Returns:
            The chosen item

        Raises:
            ValueError: If items is empty
        """
        ...

    def prompt_text(self, message: str) -> str:
        """Prompt for a non-empty line of text."""
        ...

    def show_warning(self, message: str) -> None:
        """Display a warning message."""
        ...

    def show_info(self, message: str) -> None:
        """Display an informational message."""
        ...


class CLIInteractionHandler:
    """Click-based CLI interaction handler.

    Choice numbers are shown in cyan; invalid input simply re-prompts.
    """

    def select(self, title: str, items: Sequence[SelectableItem[T]]) -> SelectableItem[T]:
        """Prompt until the user enters a number between 1 and len(items).

        Non-numeric and out-of-range input re-prompts without limit. The only
        way out without a valid choice is Ctrl+C / EOF, which click turns
        into click.Abort.

        Args:
            title: Heading displayed above the list
            items: Non-empty ordered items

        Returns:
            The chosen item

        Raises:
            ValueError: If items is empty
            click.Abort: If user cancels (Ctrl+C)
        """
        if not items:
            raise ValueError("items cannot be empty")

        click.echo()
        click.secho(title, fg="green", bold=True)
        click.echo()

        for i, item in enumerate(items, 1):
            click.echo(f"  {click.style(str(i), fg='cyan')}. {item.label}")

        click.echo()

        while True:
            choice_str = click.prompt("Enter choice", type=str, show_default=False)
            try:
                choice_num = int(choice_str.strip())
            except ValueError:
                logger.debug(f"Ignoring non-numeric choice: {choice_str!r}")
                continue

            if 1 <= choice_num <= len(items):
                return items[choice_num - 1]
            logger.debug(f"Ignoring out-of-range choice: {choice_num}")

    def prompt_text(self, message: str) -> str:
        """Prompt until a non-blank value is entered."""
        while True:
            value = click.prompt(message, type=str).strip()
            if value:
                return value

    def show_warning(self, message: str) -> None:
        """Display a warning message in yellow."""
        click.secho(f"Warning: {message}", fg="yellow", err=True)

    def show_info(self, message: str) -> None:
        """Display an informational message in green."""
        click.secho(message, fg="green")


class MockInteractionHandler:
    """Mock interaction handler for testing with pre-programmed responses.

    Choice responses are zero-based indices. All interactions are recorded
    for verification in tests.

    Example:
        >>> handler = MockInteractionHandler(choice_responses=[0], text_responses=["vm01"])
        >>> handler.prompt_text("VM name")
        'vm01'
        >>> len(handler.interactions)
        1
    """

    def __init__(
        self,
        choice_responses: list[int] | None = None,
        text_responses: list[str] | None = None,
    ):
        self.choice_responses = choice_responses or []
        self.text_responses = text_responses or []
        self.interactions: list[dict] = []
        self._choice_index = 0
        self._text_index = 0

    def select(self, title: str, items: Sequence[SelectableItem[T]]) -> SelectableItem[T]:
        """Return the item at the next pre-programmed index.

        Raises:
            ValueError: If items is empty or the response is out of range
            IndexError: If no more choice responses are available
        """
        if not items:
            raise ValueError("items cannot be empty")

        if self._choice_index >= len(self.choice_responses):
            raise IndexError(
                f"No more choice responses available. "
                f"Provided {len(self.choice_responses)}, "
                f"needed {self._choice_index + 1}"
            )

        response = self.choice_responses[self._choice_index]
        self._choice_index += 1

        if not 0 <= response < len(items):
            raise ValueError(
                f"Invalid pre-programmed response {response} for {len(items)} items"
            )

        self.interactions.append(
            {
                "type": "choice",
                "message": title,
                "labels": [item.label for item in items],
                "response": response,
            }
        )

        return items[response]

    def prompt_text(self, message: str) -> str:
        """Return the next pre-programmed text response.

        Raises:
            IndexError: If no more text responses are available
        """
        if self._text_index >= len(self.text_responses):
            raise IndexError(
                f"No more text responses available. "
                f"Provided {len(self.text_responses)}, "
                f"needed {self._text_index + 1}"
            )

        response = self.text_responses[self._text_index]
        self._text_index += 1

        self.interactions.append({"type": "text", "message": message, "response": response})
        return response

    def show_warning(self, message: str) -> None:
        self.interactions.append({"type": "warning", "message": message})

    def show_info(self, message: str) -> None:
        self.interactions.append({"type": "info", "message": message})

    def get_interactions_by_type(self, interaction_type: str) -> list[dict]:
        """Get all interactions of a specific type ("choice", "text", "warning", "info")."""
        return [
            interaction
            for interaction in self.interactions
            if interaction["type"] == interaction_type
        ]


__all__ = [
    "CLIInteractionHandler",
    "InteractionHandler",
    "MockInteractionHandler",
    "SelectableItem",
]

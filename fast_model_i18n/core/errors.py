from __future__ import annotations

from typing import Any, Hashable, Optional, TYPE_CHECKING

from fast_model_i18n.utils.serialisation import humanize

if TYPE_CHECKING:
    from fast_model_i18n.contracts.model import Model


ATTRIBUTE_JOINER = " and "


class LiteralMessage(str):
    """A message that `Errors.full_messages` emits as is, without the attribute name."""


class Errors(dict):
    """
    Validation errors keyed by attribute (or tuple of attributes for grouped checks).

    When bound to a model instance, `full_messages` names attributes through the
    model's `human_attribute_name`, so attribute labels are localized too.
    """

    def __init__(self, model_instance: Optional['Model'] = None) -> None:
        super().__init__()
        self.model_instance = model_instance

    @staticmethod
    def _normalize(attribute: Any) -> Hashable:
        if isinstance(attribute, list):
            return tuple(attribute)
        return attribute

    def add(self, attribute: Any, message: str) -> None:
        self.setdefault(self._normalize(attribute), []).append(message)

    def on(self, attribute: Any) -> Optional[list[str]]:
        messages = self.get(self._normalize(attribute))
        return messages if messages else None

    @property
    def count(self) -> int:
        return sum(len(messages) for messages in self.values())

    def is_empty(self) -> bool:
        return self.count == 0

    def attribute_label(self, attribute: Any) -> str:
        if isinstance(attribute, tuple):
            return ATTRIBUTE_JOINER.join(self.attribute_label(a) for a in attribute)
        if self.model_instance is not None:
            return self.model_instance.__class__.human_attribute_name(attribute)
        return humanize(attribute)

    def full_message(self, attribute: Any, message: str) -> str:
        if isinstance(message, LiteralMessage):
            return str(message)
        return f"{self.attribute_label(attribute)} {message}"

    def full_messages(self) -> list[str]:
        return [
            self.full_message(attribute, message)
            for attribute, messages in self.items()
            for message in messages
        ]


__all__ = [
    "ATTRIBUTE_JOINER",
    "LiteralMessage",
    "Errors",
]

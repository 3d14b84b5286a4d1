"""
Validation message resolution.

For a failed rule the resolver builds a chain of catalog keys, most specific
first, and hands the whole chain to one catalog lookup:

    {scope}.errors.models.{model}.attributes.{attribute}.{rule}.{arg1}.{arg2}
    {scope}.errors.models.{model}.attributes.{attribute}.{rule}.{arg1}
    {scope}.errors.models.{model}.attributes.{attribute}.{rule}
    {scope}.errors.models.{model}.{rule}
    {scope}.errors.messages.{rule}
    errors.attributes.{attribute}.{rule}
    errors.messages.{rule}
    errors.sequel.{rule}

A key suffix chosen by the rule (e.g. `nil`, `singular`) is appended to every
key. When nothing in the chain is translated, the rule's default message is
rendered instead.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Optional

from fast_model_i18n.contracts.translator import Translator
from fast_model_i18n.core.localization import lookup
from fast_model_i18n.core.message_templates import (
    CatalogDirective,
    Directive,
    Fixed,
    Parameterized,
    bind_arguments,
    render_default,
)
from fast_model_i18n.core.rule_specs import RuleSpecRegistry, ValidationRuleSpec, default_registry


@dataclass(frozen=True)
class ResolutionContext:
    locale_scope: str
    model_key: str
    attribute: Any
    rule_name: str
    args: tuple = ()


def key_segment(value: Any) -> str:
    """
    Render a rule argument or attribute as one catalog key segment.

    Dots would read as nesting levels in the catalog, so they become `_`
    (`2.5` -> `2_5`).
    """
    if isinstance(value, type):
        text = value.__name__
    elif isinstance(value, re.Pattern):
        text = value.pattern
    elif isinstance(value, (list, tuple, set, frozenset)):
        text = "_".join(key_segment(v) for v in value)
    elif callable(value) and hasattr(value, "__name__"):
        text = value.__name__
    else:
        text = str(value)
    return text.replace(".", "_")


class MessageResolver:
    def __init__(self, translator: Optional[Translator] = None, registry: Optional[RuleSpecRegistry] = None) -> None:
        self.translator = translator or lookup
        self.registry = registry if registry is not None else default_registry

    def key_chain(self, context: ResolutionContext, suffix: Optional[str] = None) -> list[str]:
        scope = context.locale_scope
        model = context.model_key
        attribute = key_segment(context.attribute)
        rule = context.rule_name
        exact_key = f"{scope}.errors.models.{model}.attributes.{attribute}.{rule}"

        args_keys: list[str] = []
        accumulator = exact_key
        for arg in context.args:
            accumulator = f"{accumulator}.{key_segment(arg)}"
            args_keys.append(accumulator)
        args_keys.reverse()

        keys = args_keys + [
            exact_key,
            f"{scope}.errors.models.{model}.{rule}",
            f"{scope}.errors.messages.{rule}",
            f"errors.attributes.{attribute}.{rule}",
            f"errors.messages.{rule}",
            f"errors.sequel.{rule}",
        ]

        if suffix:
            keys = [f"{key}.{suffix}" for key in keys]
        return keys

    def resolve(self, context: ResolutionContext, rule_spec: ValidationRuleSpec) -> str:
        """Resolve the message for a failed rule. Never raises; returns "" when nothing applies."""
        try:
            return self._resolve(context, rule_spec)
        except Exception:
            logging.exception(
                f"Could not resolve `{context.rule_name}` message for `{context.model_key}.{context.attribute}`"
            )
            return ""

    def resolve_rule(self, context: ResolutionContext) -> str:
        """Resolve using the registry entry named by `context.rule_name`."""
        rule_spec = self.registry.get(context.rule_name)
        if rule_spec is None:
            logging.warning(f"No validation rule spec registered for `{context.rule_name}`")
            rule_spec = ValidationRuleSpec(context.rule_name, catalog_only=True)
        return self.resolve(context, rule_spec)

    def _resolve(self, context: ResolutionContext, rule_spec: ValidationRuleSpec) -> str:
        args = tuple(context.args)
        template = rule_spec.message
        parameters: dict[str, Any] = {}
        suffix: Optional[str] = None
        default: Any = None

        if isinstance(template, Fixed):
            default = template.text
        elif isinstance(template, Parameterized):
            _, parameters = bind_arguments(template.render, args)
            default = template
        elif isinstance(template, CatalogDirective):
            call_args, parameters = bind_arguments(template.directive, args)
            directive = Directive.coerce(template.directive(*call_args))
            default = directive.default
            suffix = directive.suffix

        if not suffix and rule_spec.suffix_selector is not None:
            selector_args, _ = bind_arguments(rule_spec.suffix_selector, args)
            suffix = rule_spec.suffix_selector(*selector_args)

        keys = self.key_chain(context, suffix)
        try:
            message = self.translator(keys[0], parameters or None, keys[1:])
        except Exception:
            logging.exception(f"Catalog lookup failed for `{keys[0]}`, using default message")
            message = None
        if message and message.strip():
            return message

        logging.debug(f"No translation for `{keys[0]}` or its fallbacks, using default message")
        return render_default(default, args)


__all__ = [
    "ResolutionContext",
    "MessageResolver",
    "key_segment",
]

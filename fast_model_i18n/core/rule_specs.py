"""
Validation rule specs: one static entry per rule type.

The process-wide `default_registry` holds the built-in table. Apps override
default messages or options at configuration time and may freeze the table
afterwards:

    from fast_model_i18n.core.rule_specs import default_registry

    default_registry.override("presence", message="can't be blank")
    default_registry.override("format", allow_nil=True)
    default_registry.validate()
    default_registry.freeze()

Tests build isolated tables with `build_default_registry()`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Iterable, Iterator, Mapping, Optional

from fast_model_i18n.core.message_templates import (
    CatalogDirective,
    Directive,
    Fixed,
    MessageTemplate,
    Parameterized,
    as_template,
)
from fast_model_i18n.exceptions.common_exceptions import RuleSpecException


@dataclass(frozen=True)
class ValidationRuleSpec:
    rule_name: str
    message: Optional[MessageTemplate] = None
    suffix_selector: Optional[Callable[..., Optional[str]]] = None
    nil_message: Optional[MessageTemplate] = None
    options: Mapping[str, Any] = field(default_factory=dict)
    # Rules whose messages live only in the catalog may omit a default
    catalog_only: bool = False

    def with_message(self, message: Any) -> 'ValidationRuleSpec':
        return replace(self, message=as_template(message))

    def has_default(self) -> bool:
        if self.message is None:
            return False
        if isinstance(self.message, Fixed):
            return bool(self.message.text)
        return True


def _type_names(klass: Any) -> str:
    classes = klass if isinstance(klass, (list, tuple)) else [klass]
    return " or ".join(getattr(k, "__name__", str(k)).lower() for k in classes)


def _type_suffix(klass: Any) -> str:
    return "multiple" if isinstance(klass, (list, tuple)) else "singular"


DEFAULT_RULE_SPECS: tuple[ValidationRuleSpec, ...] = (
    ValidationRuleSpec(
        "exact_length",
        Parameterized(lambda exact: f"is not {exact} characters"),
    ),
    ValidationRuleSpec("integer", Fixed("is not a number")),
    ValidationRuleSpec("presence", Fixed("is not present")),
    ValidationRuleSpec("format", Parameterized(lambda pattern: "is invalid")),
    ValidationRuleSpec(
        "includes",
        Parameterized(lambda set: f"is not in range or set: {set!r}"),
    ),
    ValidationRuleSpec("length_range", Parameterized(lambda range: "is too short or too long")),
    ValidationRuleSpec(
        "max_length",
        Parameterized(lambda max: f"is longer than {max} characters"),
        nil_message=CatalogDirective(lambda: Directive(default="is not present", suffix="nil")),
    ),
    ValidationRuleSpec(
        "min_length",
        Parameterized(lambda min: f"is shorter than {min} characters"),
    ),
    ValidationRuleSpec("not_null", Fixed("is not present")),
    ValidationRuleSpec("numeric", Fixed("is not a number")),
    ValidationRuleSpec(
        "operator",
        Parameterized(lambda operator, rhs: f"is not {operator} {rhs}"),
    ),
    ValidationRuleSpec(
        "type",
        Parameterized(lambda klass: f"is not a valid {_type_names(klass)}"),
        suffix_selector=_type_suffix,
    ),
    ValidationRuleSpec("unique", Fixed("is already taken")),
)


class RuleSpecRegistry:
    """Table of rule specs, mutable only until frozen."""

    def __init__(self, specs: Iterable[ValidationRuleSpec] = ()) -> None:
        self._specs: dict[str, ValidationRuleSpec] = {}
        self._frozen = False
        for spec in specs:
            self.register(spec)

    def __contains__(self, rule_name: str) -> bool:
        return rule_name in self._specs

    def __iter__(self) -> Iterator[ValidationRuleSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)

    def __getitem__(self, rule_name: str) -> ValidationRuleSpec:
        try:
            return self._specs[rule_name]
        except KeyError:
            raise RuleSpecException(f"Unknown validation rule `{rule_name}`", rule_name=rule_name) from None

    def get(self, rule_name: str) -> Optional[ValidationRuleSpec]:
        return self._specs.get(rule_name)

    def names(self) -> list[str]:
        return list(self._specs.keys())

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, spec: ValidationRuleSpec) -> ValidationRuleSpec:
        self._ensure_mutable(spec.rule_name)
        self._specs[spec.rule_name] = spec
        return spec

    def override(
        self,
        rule_name: str,
        *,
        message: Any = None,
        nil_message: Any = None,
        suffix_selector: Optional[Callable[..., Optional[str]]] = None,
        **options: Any,
    ) -> ValidationRuleSpec:
        """
        Replace parts of an existing rule spec.

        Keyword arguments other than the message fields become default
        validation options of the rule (e.g. `allow_nil=True`).
        """
        spec = self[rule_name]
        self._ensure_mutable(rule_name)

        changes: dict[str, Any] = {}
        if message is not None:
            changes["message"] = as_template(message)
        if nil_message is not None:
            changes["nil_message"] = as_template(nil_message)
        if suffix_selector is not None:
            changes["suffix_selector"] = suffix_selector
        if options:
            changes["options"] = {**spec.options, **options}

        updated = replace(spec, **changes)
        self._specs[rule_name] = updated
        logging.debug(f"Validation rule `{rule_name}` overridden ({', '.join(changes) or 'no changes'})")
        return updated

    def validate(self) -> None:
        """Check every rule can produce a message. Raises on the first misconfigured rule."""
        for spec in self._specs.values():
            if spec.catalog_only:
                continue
            if not spec.has_default():
                raise RuleSpecException(
                    f"Validation rule `{spec.rule_name}` has no default message", rule_name=spec.rule_name
                )
            if spec.nil_message is not None and isinstance(spec.nil_message, Fixed) and not spec.nil_message.text:
                raise RuleSpecException(
                    f"Validation rule `{spec.rule_name}` has an empty nil message", rule_name=spec.rule_name
                )

    def freeze(self) -> None:
        self._frozen = True

    def copy(self) -> 'RuleSpecRegistry':
        return RuleSpecRegistry(self._specs.values())

    def _ensure_mutable(self, rule_name: str) -> None:
        if self._frozen:
            raise RuleSpecException(
                f"Cannot change validation rule `{rule_name}`: the rule table is frozen", rule_name=rule_name
            )


def build_default_registry() -> RuleSpecRegistry:
    return RuleSpecRegistry(DEFAULT_RULE_SPECS)


default_registry = build_default_registry()


__all__ = [
    "ValidationRuleSpec",
    "RuleSpecRegistry",
    "DEFAULT_RULE_SPECS",
    "build_default_registry",
    "default_registry",
]

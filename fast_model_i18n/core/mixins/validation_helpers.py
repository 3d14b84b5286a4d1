"""
Instance-level validation helpers for models.

    class Album(Model):
        name: str
        num_tracks: Optional[int] = None

        def validate(self):
            self.validates_presence("name")
            self.validates_min_length(1, "name")
            self.validates_integer("num_tracks", allow_nil=True)

All helpers except `validates_unique` take an attribute name or a list of names
and these options:

    allow_missing   skip attributes never assigned on the instance
    allow_nil       skip None values
    allow_blank     skip blank values (None, empty or whitespace strings, empty collections)
    from_values     read the raw field value instead of the attribute accessor
    message         a str is used as is; a template or callable goes through localization

Default options per rule come from the rule spec table and can be changed per
model by overriding `default_validation_options`.
"""

from __future__ import annotations

import builtins
import inspect
import operator as operators
import re
import types
from typing import Any, Awaitable, Callable, Iterable, Optional, Union, TYPE_CHECKING, get_args, get_origin

from fast_model_i18n.core.message_resolver import ResolutionContext, key_segment
from fast_model_i18n.core.message_templates import CatalogDirective, Directive, as_template
from fast_model_i18n.core.rule_specs import ValidationRuleSpec
from fast_model_i18n.utils.model_resolver import resolve_model_reference

if TYPE_CHECKING:
    from fast_model_i18n.contracts.model import Model


_OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "<": operators.lt,
    "<=": operators.le,
    ">": operators.gt,
    ">=": operators.ge,
    "==": operators.eq,
    "!=": operators.ne,
}

_VALIDATION_OPTIONS = ("allow_missing", "allow_nil", "allow_blank", "from_values", "message")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set, frozenset, bytes)):
        return len(value) == 0
    return False


def _as_attributes(atts: Union[str, Iterable[str]]) -> list[str]:
    if isinstance(atts, str):
        return [atts]
    return list(atts)


def _resolve_class(klass: Any) -> Any:
    if isinstance(klass, (list, tuple)):
        return [_resolve_class(k) for k in klass]
    if isinstance(klass, str):
        builtin = getattr(builtins, klass, None)
        if isinstance(builtin, type):
            return builtin
        return resolve_model_reference(klass)
    return klass


def _class_from_annotation(annotation: Any) -> Any:
    """Map a field annotation to the class(es) values must be instances of, or None."""
    origin = get_origin(annotation)
    if origin is None:
        if isinstance(annotation, type) and annotation is not Any:
            return annotation
        return None

    if origin is Union or origin is types.UnionType:
        classes = [_class_from_annotation(arg) for arg in get_args(annotation) if arg is not type(None)]
        if not classes or any(c is None for c in classes):
            return None
        flat: list[type] = []
        for c in classes:
            flat.extend(c if isinstance(c, list) else [c])
        return flat[0] if len(flat) == 1 else flat
    if isinstance(origin, type):
        return origin
    return None


class ValidationHelpers:
    """Mixin adding `validates_*` helpers and localized error messages to models."""

    #
    # Message resolution
    #
    def validation_rule_spec(self: 'Model', rule_name: str) -> ValidationRuleSpec:
        return self.__class__.get_message_resolver().registry[rule_name]

    def default_validation_options(self: 'Model', rule_name: str) -> dict[str, Any]:
        """Default options for a rule. Override per model for different defaults."""
        return dict(self.validation_rule_spec(rule_name).options)

    def validation_error_message(self: 'Model', attribute: Any, rule_name: str, message: Any = None, *args: Any) -> str:
        """
        The error message for a failed rule.

        A str message is returned as is. Otherwise the message (or the rule's
        default template) is resolved through the model's message resolver,
        with the model's scope and key and the rule arguments.
        """
        if isinstance(message, str):
            return message

        model_cls = self.__class__
        rule_spec = self.validation_rule_spec(rule_name)
        if message is not None:
            rule_spec = rule_spec.with_message(message)

        context = ResolutionContext(
            locale_scope=model_cls.i18n_scope,
            model_key=model_cls.i18n_key(),
            attribute=attribute,
            rule_name=rule_name,
            args=tuple(args),
        )
        return model_cls.get_message_resolver().resolve(context, rule_spec)

    def _validatable_attributes(
        self: 'Model',
        rule_name: str,
        atts: Union[str, Iterable[str]],
        opts: dict[str, Any],
        check: Callable[[str, Any, Any], Optional[str]],
    ) -> None:
        """
        Run `check(attribute, value, message)` for every attribute not skipped by
        the allow_* options; a non-empty returned message is added as an error.
        """
        unknown = set(opts) - set(_VALIDATION_OPTIONS) - {"nil_message"}
        if unknown:
            raise TypeError(f"Unknown validation options for `{rule_name}`: {', '.join(sorted(unknown))}")

        options = {**self.default_validation_options(rule_name), **opts}
        allow_missing = options.get("allow_missing", False)
        allow_nil = options.get("allow_nil", False)
        allow_blank = options.get("allow_blank", False)
        from_values = options.get("from_values", False)
        message = options.get("message")

        values = self.values()
        for attribute in _as_attributes(atts):
            if allow_missing and attribute not in values:
                continue
            value = values.get(attribute) if from_values else self.get_column_value(attribute)
            if allow_nil and value is None:
                continue
            if allow_blank and is_blank(value):
                continue
            error = check(attribute, value, message)
            if error:
                self.errors.add(attribute, error)

    #
    # Validations
    #
    def validates_exact_length(self, exact: int, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check that the attribute values are the given exact length."""
        def check(attribute, value, message):
            if value is None or len(value) != exact:
                return self.validation_error_message(attribute, "exact_length", message, exact)

        self._validatable_attributes("exact_length", atts, opts, check)

    def validates_format(self, with_: Union[str, re.Pattern], atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check the string representation of the attribute value(s) against the pattern."""
        pattern = with_ if isinstance(with_, re.Pattern) else re.compile(with_)

        def check(attribute, value, message):
            if not pattern.search(str(value)):
                return self.validation_error_message(attribute, "format", message, with_)

        self._validatable_attributes("format", atts, opts, check)

    def validates_includes(self, set_: Any, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check attribute value(s) is included in the given collection or range."""
        def check(attribute, value, message):
            try:
                included = value in set_
            except TypeError:
                included = False
            if not included:
                return self.validation_error_message(attribute, "includes", message, set_)

        self._validatable_attributes("includes", atts, opts, check)

    def validates_integer(self, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check attribute value(s) string representation is a valid integer."""
        def check(attribute, value, message):
            try:
                int(str(value))
            except ValueError:
                return self.validation_error_message(attribute, "integer", message)

        self._validatable_attributes("integer", atts, opts, check)

    def validates_length_range(self, range_: Any, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check that the attribute values length is in the specified range."""
        def check(attribute, value, message):
            if value is None or len(value) not in range_:
                return self.validation_error_message(attribute, "length_range", message, range_)

        self._validatable_attributes("length_range", atts, opts, check)

    def validates_max_length(self, max_: int, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """
        Check that the attribute values are not longer than the given max length.

        Accepts a `nil_message` option used when the value is None instead of too long.
        """
        nil_message = opts.get("nil_message")

        def check(attribute, value, message):
            if value is None:
                return self._nil_message(attribute, nil_message)
            if len(value) > max_:
                return self.validation_error_message(attribute, "max_length", message, max_)

        self._validatable_attributes("max_length", atts, opts, check)

    def _nil_message(self: 'Model', attribute: str, nil_message: Any) -> str:
        """
        Message for a None value. Anything but a plain str or a directive is
        looked up under the `nil` suffixed keys, with itself as the default.
        """
        if nil_message is None:
            nil_message = self.validation_rule_spec("max_length").nil_message
        if nil_message is not None and not isinstance(nil_message, (str, CatalogDirective)):
            template = as_template(nil_message)
            nil_message = CatalogDirective(lambda: Directive(default=template, suffix="nil"))
        return self.validation_error_message(attribute, "max_length", nil_message)

    def validates_min_length(self, min_: int, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check that the attribute values are not shorter than the given min length."""
        def check(attribute, value, message):
            if value is None or len(value) < min_:
                return self.validation_error_message(attribute, "min_length", message, min_)

        self._validatable_attributes("min_length", atts, opts, check)

    def validates_not_null(self, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check attribute value(s) are not None."""
        def check(attribute, value, message):
            if value is None:
                return self.validation_error_message(attribute, "not_null", message)

        self._validatable_attributes("not_null", atts, opts, check)

    def validates_numeric(self, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check attribute value(s) string representation is a valid number."""
        def check(attribute, value, message):
            try:
                float(str(value))
            except ValueError:
                return self.validation_error_message(attribute, "numeric", message)

        self._validatable_attributes("numeric", atts, opts, check)

    def validates_operator(
        self,
        operator: Union[str, Callable[[Any, Any], bool]],
        rhs: Any,
        atts: Union[str, Iterable[str]],
        **opts: Any,
    ) -> None:
        """
        Check attribute value(s) against a value and comparison, e.g.
        `validates_operator(">", 3, "value")` validates that value > 3.
        """
        if isinstance(operator, str):
            if operator not in _OPERATORS:
                raise ValueError(f"Unsupported operator `{operator}`")
            compare = _OPERATORS[operator]
        else:
            compare = operator
        operator_name = operator if isinstance(operator, str) else key_segment(operator)

        def check(attribute, value, message):
            try:
                passed = value is not None and compare(value, rhs)
            except TypeError:
                passed = False
            if not passed:
                return self.validation_error_message(attribute, "operator", message, operator_name, rhs)

        self._validatable_attributes("operator", atts, opts, check)

    def validates_type(self, klass: Any, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """
        Check if value is an instance of a class. If `klass` is a list, the value
        must be an instance of one of the classes in it. Class names are resolved
        against builtins, then models.
        """
        klass = _resolve_class(klass)
        classes = tuple(klass) if isinstance(klass, list) else (klass,)

        def check(attribute, value, message):
            if not isinstance(value, classes):
                return self.validation_error_message(attribute, "type", message, klass)

        self._validatable_attributes("type", atts, opts, check)

    def validates_schema_types(self: 'Model', atts: Optional[Union[str, Iterable[str]]] = None, **opts: Any) -> None:
        """
        Validate that field values are instances of their annotated types.
        None is allowed unless `allow_nil=False` is passed.
        """
        fields = self.model_fields()
        attributes = _as_attributes(atts) if atts is not None else list(fields.keys())
        for attribute in attributes:
            klass = _class_from_annotation(fields.get(attribute))
            if klass is None:
                continue
            self.validates_type(klass, attribute, **{"allow_nil": True, **opts})

    def validates_presence(self, atts: Union[str, Iterable[str]], **opts: Any) -> None:
        """Check attribute value(s) are not blank. False counts as present."""
        def check(attribute, value, message):
            if is_blank(value) and value is not False:
                return self.validation_error_message(attribute, "presence", message)

        self._validatable_attributes("presence", atts, opts, check)

    async def validates_unique(
        self: 'Model',
        *atts: Union[str, list[str], tuple[str, ...]],
        only_if_modified: bool = False,
        where: Optional[Callable[[dict, 'Model', list[str]], Union[dict, Awaitable[dict]]]] = None,
        query: Optional[dict[str, Any]] = None,
        from_values: bool = False,
        message: Any = None,
    ) -> None:
        """
        Check that no other stored document has the same value(s).

        Pass a list (or tuple) of fields to require the combination to be unique,
        instead of each field separately:

            await self.validates_unique(["column1", "column2"])   # grouping
            await self.validates_unique("column1", "column2")     # each one

        Options:
            only_if_modified: only check new records or ones with a changed column.
            where: callable `(query, instance, columns) -> query` building the
                filter itself (e.g. for case insensitive matching).
            query: base filter the uniqueness is scoped to.
            message: the message to use (default: "is already taken").

        Does not respect the allow_* options. Attributes that already have
        errors, and values that are None, are skipped.
        """
        options = self.default_validation_options("unique")
        only_if_modified = only_if_modified or options.get("only_if_modified", False)
        from_values = from_values or options.get("from_values", False)
        if message is None:
            message = options.get("message")

        values = self.values()
        for attribute in atts:
            columns = list(attribute) if isinstance(attribute, (list, tuple)) else [attribute]
            if any(self.errors.on(column) for column in columns):
                continue
            if only_if_modified and not self.is_new() and not any(self.is_dirty(column) for column in columns):
                continue

            base_query = dict(query or {})
            if where is not None:
                filter_query = where(base_query, self, columns)
                if inspect.isawaitable(filter_query):
                    filter_query = await filter_query
            else:
                column_values = [values.get(c) if from_values else self.get_column_value(c) for c in columns]
                if any(v is None for v in column_values):
                    continue
                filter_query = {**base_query, **dict(zip(columns, column_values))}

            if not self.is_new():
                filter_query = {"$and": [filter_query, {"_id": {"$ne": self._id}}]}

            if await self.__class__.exists(filter_query):
                error_attribute = tuple(columns) if len(columns) > 1 else columns[0]
                error = self.validation_error_message(error_attribute, "unique", message)
                if error:
                    self.errors.add(error_attribute, error)

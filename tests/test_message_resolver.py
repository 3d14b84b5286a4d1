import re

import pytest

from fast_model_i18n.core.message_resolver import MessageResolver, ResolutionContext, key_segment
from fast_model_i18n.core.message_templates import CatalogDirective, Directive, Fixed, Parameterized
from fast_model_i18n.core.rule_specs import ValidationRuleSpec


class RecordingTranslator:
    """Flat key -> text catalog that records each lookup call."""

    def __init__(self, entries=None):
        self.entries = dict(entries or {})
        self.calls = []

    def __call__(self, key, parameters=None, fallbacks=()):
        chain = [key, *fallbacks]
        self.calls.append((chain, parameters))
        for candidate in chain:
            if candidate in self.entries:
                text = self.entries[candidate]
                return text.format(**parameters) if parameters else text
        return None


def title_context(*args, rule="max_length"):
    return ResolutionContext("blog", "post", "title", rule, args)


def test_key_chain_order():
    resolver = MessageResolver(RecordingTranslator())

    keys = resolver.key_chain(ResolutionContext("blog", "post", "title", "operator", (">", 3)))

    assert keys == [
        "blog.errors.models.post.attributes.title.operator.>.3",
        "blog.errors.models.post.attributes.title.operator.>",
        "blog.errors.models.post.attributes.title.operator",
        "blog.errors.models.post.operator",
        "blog.errors.messages.operator",
        "errors.attributes.title.operator",
        "errors.messages.operator",
        "errors.sequel.operator",
    ]


def test_key_chain_suffix_applies_to_every_key():
    resolver = MessageResolver(RecordingTranslator())

    keys = resolver.key_chain(title_context(None), suffix="nil")

    assert keys[0] == "blog.errors.models.post.attributes.title.max_length.None.nil"
    assert all(key.endswith(".nil") for key in keys)


def test_resolve_passes_whole_chain_to_one_lookup(registry):
    translator = RecordingTranslator()
    resolver = MessageResolver(translator, registry)

    resolver.resolve(title_context(10), registry["max_length"])

    assert len(translator.calls) == 1
    chain, parameters = translator.calls[0]
    assert chain == resolver.key_chain(title_context(10))
    assert parameters == {"max": 10}


def test_worked_example(registry):
    spec = registry["max_length"]
    translator = RecordingTranslator({
        "blog.errors.models.post.attributes.title.max_length": "too long!",
        "errors.messages.max_length": "way too long",
    })
    resolver = MessageResolver(translator, registry)

    assert resolver.resolve(title_context(10), spec) == "too long!"

    del translator.entries["blog.errors.models.post.attributes.title.max_length"]
    assert resolver.resolve(title_context(10), spec) == "way too long"

    translator.entries.clear()
    assert resolver.resolve(title_context(10), spec) == "is longer than 10 characters"


def test_worked_example_against_the_catalog(catalog, registry):
    resolver = MessageResolver(registry=registry)
    catalog({
        "blog": {"errors": {"models": {"post": {"attributes": {"title": {"max_length": "too long!"}}}}}},
        "errors": {"messages": {"max_length": "longer than {max}"}},
    })

    assert resolver.resolve(title_context(10), registry["max_length"]) == "too long!"
    assert resolver.resolve(
        ResolutionContext("blog", "post", "body", "max_length", (10,)), registry["max_length"]
    ) == "longer than 10"


def test_argument_keys_win_over_attribute_key(registry):
    translator = RecordingTranslator({
        "blog.errors.models.post.attributes.title.exact_length.5": "needs five",
        "blog.errors.models.post.attributes.title.exact_length": "wrong length",
    })
    resolver = MessageResolver(translator, registry)

    assert resolver.resolve(title_context(5, rule="exact_length"), registry["exact_length"]) == "needs five"
    assert resolver.resolve(title_context(6, rule="exact_length"), registry["exact_length"]) == "wrong length"


def test_least_specific_present_beats_default(registry):
    translator = RecordingTranslator({"errors.messages.presence": "can't be blank"})
    resolver = MessageResolver(translator, registry)

    assert resolver.resolve(title_context(rule="presence"), registry["presence"]) == "can't be blank"


def test_legacy_library_key_is_last_resort(registry):
    translator = RecordingTranslator({"errors.sequel.unique": "already used"})
    resolver = MessageResolver(translator, registry)

    assert resolver.resolve(title_context(rule="unique"), registry["unique"]) == "already used"


def test_suffix_selector_prefers_suffixed_key():
    spec = ValidationRuleSpec(
        "max_length",
        Fixed("is not present"),
        suffix_selector=lambda value: "nil" if value is None else None,
    )
    translator = RecordingTranslator({
        "errors.messages.max_length.nil": "is missing",
        "blog.errors.messages.max_length": "too long",
    })
    resolver = MessageResolver(translator)

    assert resolver.resolve(title_context(None), spec) == "is missing"
    chain, _ = translator.calls[0]
    assert all(key.endswith(".nil") for key in chain)

    assert resolver.resolve(title_context(3), spec) == "too long"


def test_nil_directive_of_max_length(registry):
    spec = registry["max_length"]
    nil_spec = spec.with_message(spec.nil_message)
    translator = RecordingTranslator({"errors.messages.max_length.nil": "must be given"})
    resolver = MessageResolver(translator, registry)

    assert resolver.resolve(title_context(), nil_spec) == "must be given"
    translator.entries.clear()
    assert resolver.resolve(title_context(), nil_spec) == "is not present"


def test_type_rule_suffix_depends_on_argument_shape(registry):
    translator = RecordingTranslator({
        "errors.messages.type.singular": "must be a {klass.__name__}",
        "errors.messages.type.multiple": "has the wrong type",
    })
    resolver = MessageResolver(translator, registry)

    single = ResolutionContext("blog", "post", "title", "type", (str,))
    many = ResolutionContext("blog", "post", "title", "type", ([int, float],))

    assert resolver.resolve(single, registry["type"]) == "must be a str"
    assert resolver.resolve(many, registry["type"]) == "has the wrong type"

    translator.entries.clear()
    assert resolver.resolve(single, registry["type"]) == "is not a valid str"
    assert resolver.resolve(many, registry["type"]) == "is not a valid int or float"


def test_directive_mapping_and_template_default():
    spec = ValidationRuleSpec(
        "within",
        CatalogDirective(lambda low, high: {"default": Parameterized(lambda low, high: f"not in {low}..{high}"), "suffix": "range"}),
    )
    translator = RecordingTranslator({"errors.messages.within.range": "between {low} and {high}"})
    resolver = MessageResolver(translator)
    context = ResolutionContext("blog", "post", "score", "within", (1, 5))

    assert resolver.resolve(context, spec) == "between 1 and 5"
    translator.entries.clear()
    assert resolver.resolve(context, spec) == "not in 1..5"


def test_blank_catalog_entry_falls_through_to_default(registry):
    translator = RecordingTranslator({"blog.errors.models.post.attributes.title.max_length.10": ""})
    resolver = MessageResolver(translator, registry)

    assert resolver.resolve(title_context(10), registry["max_length"]) == "is longer than 10 characters"


def test_blank_catalog_entry_in_real_catalog(catalog, registry):
    catalog({"errors": {"messages": {"presence": ""}}})
    resolver = MessageResolver(registry=registry)

    assert resolver.resolve(title_context(rule="presence"), registry["presence"]) == "is not present"


def test_missing_default_resolves_to_empty_string():
    resolver = MessageResolver(RecordingTranslator())

    assert resolver.resolve(title_context(), ValidationRuleSpec("custom", catalog_only=True)) == ""
    assert resolver.resolve(
        title_context(), ValidationRuleSpec("custom", CatalogDirective(lambda: Directive(suffix="x")))
    ) == ""


def test_resolution_never_raises():
    def broken(*args):
        raise RuntimeError("template exploded")

    def failing_translator(key, parameters=None, fallbacks=()):
        raise RuntimeError("catalog down")

    assert MessageResolver(RecordingTranslator()).resolve(
        title_context(1), ValidationRuleSpec("custom", Parameterized(broken))
    ) == ""
    assert MessageResolver(failing_translator).resolve(
        title_context(1), ValidationRuleSpec("custom", Parameterized(broken))
    ) == ""


def test_failed_lookup_falls_back_to_default(registry):
    def failing_translator(key, parameters=None, fallbacks=()):
        raise RuntimeError("catalog down")

    resolver = MessageResolver(failing_translator, registry)

    assert resolver.resolve(title_context(10), registry["max_length"]) == "is longer than 10 characters"
    assert resolver.resolve(title_context(1), ValidationRuleSpec("custom", Fixed("text"))) == "text"


def test_malformed_catalog_placeholder_keeps_raw_text(catalog, registry):
    catalog({"errors": {"messages": {"max_length": "is longer than {max[0]} characters", "min_length": "{min.real.x}"}}})
    resolver = MessageResolver(registry=registry)

    assert resolver.resolve(title_context(10), registry["max_length"]) == "is longer than {max[0]} characters"
    assert resolver.resolve(title_context(3, rule="min_length"), registry["min_length"]) == "{min.real.x}"


def test_resolve_rule_uses_registry(registry):
    registry.override("presence", message="must be filled in")
    resolver = MessageResolver(RecordingTranslator(), registry)

    assert resolver.resolve_rule(title_context(rule="presence")) == "must be filled in"
    assert resolver.resolve_rule(title_context(rule="unknown_rule")) == ""


@pytest.mark.parametrize(
    "value, segment",
    [
        (10, "10"),
        (str, "str"),
        (re.compile(r"^\d+$"), r"^\d+$"),
        ([int, float], "int_float"),
        (("a", "b"), "a_b"),
        (len, "len"),
        (2.5, "2_5"),
        (re.compile(r"^a.b$"), "^a_b$"),
    ],
)
def test_key_segment(value, segment):
    assert key_segment(value) == segment

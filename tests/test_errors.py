from typing import Optional

from fast_model_i18n import Model
from fast_model_i18n.core.errors import Errors, LiteralMessage
from fast_model_i18n.core.localization import set_locale


class Invoice(Model):
    i18n_scope = "billing"

    number: Optional[str] = None
    due_on: Optional[str] = None
    customer_id: Optional[str] = None


def test_errors_collection_basics():
    errors = Errors()

    errors.add("name", "is not present")
    errors.add("name", "is too short")
    errors.add(["a", "b"], "is already taken")

    assert errors.on("name") == ["is not present", "is too short"]
    assert errors.on(("a", "b")) == ["is already taken"]
    assert errors.on("missing") is None
    assert errors.count == 3
    assert not errors.is_empty()


def test_full_messages_without_model_humanize_names():
    errors = Errors()
    errors.add("first_name", "is not present")
    errors.add("author_id", "is invalid")
    errors.add(("start", "end"), "overlap")
    errors.add("base", LiteralMessage("Something went wrong"))

    assert errors.full_messages() == [
        "First name is not present",
        "Author is invalid",
        "Start and End overlap",
        "Something went wrong",
    ]


def test_full_messages_translate_attribute_names(catalog):
    catalog({"billing": {"attributes": {"invoice": {"number": "Invoice number", "due_on": "Due date"}}}})
    invoice = Invoice()

    invoice.errors.add("number", "is not present")
    invoice.errors.add(["due_on", "customer_id"], "conflict")

    assert invoice.errors.model_instance is invoice
    assert invoice.errors.full_messages() == [
        "Invoice number is not present",
        "Due date and Customer conflict",
    ]


def test_full_messages_in_other_locale(catalog):
    catalog({"billing": {"attributes": {"invoice": {"number": "Número"}}}}, locale="es")
    catalog({"errors": {"messages": {"presence": "no está presente"}}}, locale="es")

    set_locale("es")

    invoice = Invoice()
    invoice.validates_presence("number")

    assert invoice.errors.full_messages() == ["Número no está presente"]


def test_human_attribute_name():
    assert Invoice.i18n_key() == "invoice"
    assert Invoice.human_attribute_name("due_on") == "Due on"

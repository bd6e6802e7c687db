"""Fake field values for previewing notifications and templates."""

from __future__ import annotations

import random
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol

from formflow.schemas.forms import FieldDefinition

# Sample data pools
FIRST_NAMES = [
    "Emma", "Olivia", "Ava", "Isabella", "Sophia", "Mia", "Charlotte", "Amelia",
    "James", "John", "Robert", "Michael", "William", "David", "Daniel", "Joseph",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Wilson", "Anderson", "Taylor", "Moore", "Jackson", "Martin", "Lee", "Clark",
]

PREFIXES = ["Mr.", "Mrs.", "Ms.", "Dr."]

CITIES = ["Springfield", "Riverside", "Fairview", "Madison", "Georgetown", "Clinton"]
STATES = ["CA", "TX", "FL", "NY", "PA", "IL", "OH", "GA", "NC", "MI"]
STREET_NAMES = ["Main", "Oak", "Pine", "Maple", "Cedar", "Elm", "Lake", "Hill"]
STREET_SUFFIXES = ["Street", "Avenue", "Road", "Lane", "Drive", "Court"]

EMAIL_DOMAINS = ["example.com", "example.org", "example.net"]

WORDS = [
    "lorem", "ipsum", "dolor", "sit", "amet", "consectetur", "adipiscing", "elit",
    "sed", "do", "eiusmod", "tempor", "incididunt", "ut", "labore", "et", "dolore",
    "magna", "aliqua", "enim", "ad", "minim", "veniam", "quis", "nostrud",
]

ELEMENT_FIELD_TYPES = ("entries", "categories", "tags", "users", "products", "variants", "file_upload")


class FieldValueGenerator(Protocol):
    def generate_fake_value(self, field: FieldDefinition, rng: random.Random) -> Any: ...


def _sentence(rng: random.Random, words: int) -> str:
    text = " ".join(rng.choice(WORDS) for _ in range(words))
    return text.capitalize() + "."


def _email(rng: random.Random) -> str:
    first = rng.choice(FIRST_NAMES).lower()
    last = rng.choice(LAST_NAMES).lower()
    return f"{first}.{last}{rng.randint(1, 99)}@{rng.choice(EMAIL_DOMAINS)}"


def _random_option(field: FieldDefinition, rng: random.Random) -> str:
    if not field.options:
        return ""
    return rng.choice(field.options).value


def _phone_number(rng: random.Random) -> str:
    """Random US phone number in E.164 format."""
    return f"+1{rng.randint(200, 999)}{rng.randint(100, 999)}{rng.randint(1000, 9999)}"


class TextGenerator:
    def generate_fake_value(self, field, rng):
        return _sentence(rng, rng.randint(4, 10))


class MultiLineTextGenerator:
    def generate_fake_value(self, field, rng):
        return " ".join(_sentence(rng, rng.randint(6, 12)) for _ in range(3))


class EmailGenerator:
    def generate_fake_value(self, field, rng):
        return _email(rng)


class NumberGenerator:
    def generate_fake_value(self, field, rng):
        return rng.randint(0, 9)


class DateGenerator:
    def generate_fake_value(self, field, rng):
        moment = datetime(2000, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=rng.randint(0, 30 * 365 * 86400))
        return moment.isoformat()


class DropdownGenerator:
    def generate_fake_value(self, field, rng):
        value = _random_option(field, rng)
        return [value] if field.multi else value


class CheckboxesGenerator:
    def generate_fake_value(self, field, rng):
        return [_random_option(field, rng)]


class RadioGenerator:
    def generate_fake_value(self, field, rng):
        return _random_option(field, rng)


class NameGenerator:
    def generate_fake_value(self, field, rng):
        if field.use_multiple_fields:
            return {
                "prefix": rng.choice(PREFIXES),
                "first_name": rng.choice(FIRST_NAMES),
                "middle_name": rng.choice(FIRST_NAMES),
                "last_name": rng.choice(LAST_NAMES),
            }
        return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


class PhoneGenerator:
    def generate_fake_value(self, field, rng):
        number = _phone_number(rng)
        if field.country_enabled:
            return {"number": number, "country": "US"}
        return number


class AddressGenerator:
    def generate_fake_value(self, field, rng):
        return {
            "address1": f"{rng.randint(1, 9999)} {rng.choice(STREET_NAMES)} {rng.choice(STREET_SUFFIXES)}",
            "address2": str(rng.randint(1, 500)),
            "address3": rng.choice(STREET_SUFFIXES),
            "city": rng.choice(CITIES),
            "zip": f"{rng.randint(10000, 99999)}",
            "state": rng.choice(STATES),
            "country": "United States",
        }


class RecipientsGenerator:
    def generate_fake_value(self, field, rng):
        if field.display_type == "checkboxes":
            return [_random_option(field, rng)]
        if field.display_type in ("dropdown", "radio"):
            return _random_option(field, rng)
        if field.display_type == "hidden":
            return _email(rng)
        return None


class GroupGenerator:
    """One nested row built from the group's own fields."""

    def generate_fake_value(self, field, rng):
        return [get_fake_field_content(field.fields, rng)]


class ElementsGenerator:
    """Relation fields get placeholder element ids."""

    def generate_fake_value(self, field, rng):
        return [str(uuid.UUID(int=rng.getrandbits(128), version=4))]


DEFAULT_GENERATOR: FieldValueGenerator = TextGenerator()

GENERATORS: dict[str, FieldValueGenerator] = {
    "text": TextGenerator(),
    "multi_line_text": MultiLineTextGenerator(),
    "email": EmailGenerator(),
    "number": NumberGenerator(),
    "date": DateGenerator(),
    "dropdown": DropdownGenerator(),
    "checkboxes": CheckboxesGenerator(),
    "radio": RadioGenerator(),
    "name": NameGenerator(),
    "phone": PhoneGenerator(),
    "address": AddressGenerator(),
    "recipients": RecipientsGenerator(),
    "group": GroupGenerator(),
    **{field_type: ElementsGenerator() for field_type in ELEMENT_FIELD_TYPES},
}


def get_generator(field_type: str) -> FieldValueGenerator:
    return GENERATORS.get(field_type, DEFAULT_GENERATOR)


def get_fake_field_content(
    fields: list[FieldDefinition | dict],
    rng: random.Random | None = None,
) -> dict[str, Any]:
    """Fake value per field handle."""
    rng = rng or random.Random()
    content: dict[str, Any] = {}
    for raw in fields:
        field = raw if isinstance(raw, FieldDefinition) else FieldDefinition.model_validate(raw)
        content[field.handle] = get_generator(field.type).generate_fake_value(field, rng)
    return content


def populate_fake_submission(submission, fields=None, rng: random.Random | None = None):
    """Fill a submission's field values from its form's field layout."""
    if fields is None:
        fields = submission.form.fields if submission.form else []
    submission.field_values = get_fake_field_content(fields, rng)
    return submission

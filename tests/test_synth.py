import random
from types import SimpleNamespace

import pytest
from faker import Faker

from fake_counter.models import GenerationError
from fake_counter.registry import INSTITUTION_SCHEMA, REGISTRY, REPORT_IDS, STATUS_SCHEMA
from fake_counter.synth import FakeDataGenerator, SchemaCache, SchemaFaker, compile_description, fingerprint


def make_generator(seed: int = 7, extra_items: int = 3) -> FakeDataGenerator:
    faker = Faker()
    faker.seed_instance(seed)
    return FakeDataGenerator(rng=random.Random(seed), faker=faker, extra_items=extra_items)


@pytest.mark.parametrize("report_id", REPORT_IDS)
def test_generated_items_validate_against_report_schema(report_id):
    generator = make_generator()
    schema = REGISTRY[report_id]
    items = generator.generate(schema, min_items=2)
    assert len(items) >= 2
    for item in items:
        schema.validate(item)


def test_status_generation_respects_max_items():
    items = make_generator().generate(STATUS_SCHEMA, min_items=1, max_items=1)
    assert len(items) == 1
    status = STATUS_SCHEMA.validate(items[0])
    assert status.Service_Active is True


def test_member_generation_validates():
    for member in make_generator().generate(INSTITUTION_SCHEMA, min_items=3):
        INSTITUTION_SCHEMA.validate(member)


def test_zero_extra_items_yields_exactly_the_minimum():
    items = make_generator(extra_items=0).generate(REGISTRY["PR"], min_items=4)
    assert len(items) == 4


def test_fingerprint_ignores_key_order():
    assert fingerprint({"a": 1, "b": [1, 2]}) == fingerprint({"b": [1, 2], "a": 1})
    assert fingerprint({"a": 1}) != fingerprint({"a": 2})


def test_cache_compiles_each_description_once():
    generator = make_generator()
    schema = REGISTRY["TR"]
    generator.generate(schema, min_items=1)
    generator.generate(schema, min_items=1)
    assert len(generator.cache) == 1

    description = generator.describe(schema, 1)
    assert generator.compiled(description) is generator.compiled(description)


def test_cache_keeps_first_value():
    cache = SchemaCache()
    first = cache.populate("key", lambda: {"type": "string"})
    second = cache.populate("key", lambda: {"type": "integer"})
    assert second is first
    assert "key" in cache
    assert cache.get("missing") is None


def test_compile_inlines_refs_and_collapses_nullable():
    compiled = compile_description(
        {
            "type": "object",
            "properties": {
                "child": {"anyOf": [{"$ref": "#/$defs/Child"}, {"type": "null"}], "default": None},
            },
            "$defs": {"Child": {"type": "object", "title": "Child", "properties": {"x": {"type": "integer"}}}},
        }
    )
    child = compiled["properties"]["child"]
    assert child["type"] == "object"
    assert child["nullable"] is True
    assert "anyOf" not in child
    assert "$defs" not in compiled


def test_cyclic_reference_raises():
    description = {
        "$ref": "#/$defs/Node",
        "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
    }
    with pytest.raises(GenerationError):
        compile_description(description)


def test_unresolvable_reference_raises():
    with pytest.raises(GenerationError):
        compile_description({"$ref": "#/$defs/Missing"})


def test_unknown_pattern_raises():
    schema = SimpleNamespace(description={"type": "string", "pattern": "^zz-[0-9]+$"})
    with pytest.raises(GenerationError):
        make_generator().generate(schema, min_items=1)


def test_max_items_below_min_items_raises():
    with pytest.raises(GenerationError):
        make_generator().generate(REGISTRY["PR"], min_items=3, max_items=1)


def test_negative_minimum_raises():
    with pytest.raises(GenerationError):
        make_generator().generate(REGISTRY["PR"], min_items=-1)


def test_empty_numeric_range_raises():
    synthesizer = SchemaFaker(random.Random(1), Faker())
    with pytest.raises(GenerationError):
        synthesizer.value({"type": "integer", "minimum": 5, "maximum": 1}, "Value")


def test_string_length_bounds_are_honoured():
    synthesizer = SchemaFaker(random.Random(1), Faker())
    value = synthesizer.value({"type": "string", "minLength": 40, "maxLength": 45}, "Platform")
    assert 40 <= len(value) <= 45

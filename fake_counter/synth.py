"""Schema-driven fake data synthesis.

Domain schemas are pydantic models. ``FakeDataGenerator.generate`` wraps a
model's JSON Schema into an array description, compiles it once per content
fingerprint (``$ref`` inlined, nullable ``anyOf`` collapsed) and walks the
compiled description with a seedable random source and a Faker instance.
"""
from __future__ import annotations

import hashlib
import json
import logging
import random
import re
from datetime import timezone
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Protocol

from faker import Faker

from .models import GenerationError

logger = logging.getLogger(__name__)

ValueFactory = Callable[["SchemaFaker"], str]

PATTERN_GENERATORS: Dict[str, ValueFactory] = {}

FORMAT_GENERATORS: Dict[str, ValueFactory] = {
    "date": lambda fake: fake.faker.date_between(start_date="-10y", end_date="today").isoformat(),
    "date-time": lambda fake: fake.faker.date_time_between(
        start_date="-1y", end_date="now", tzinfo=timezone.utc
    ).isoformat(),
    "uri": lambda fake: fake.faker.url(),
    "email": lambda fake: fake.faker.email(),
}

STRING_HINTS: Dict[str, ValueFactory] = {
    "Platform": lambda fake: fake.faker.domain_word().capitalize(),
    "Publisher": lambda fake: fake.faker.company(),
    "Database": lambda fake: fake.faker.catch_phrase(),
    "Title": lambda fake: fake.faker.sentence(nb_words=4).rstrip("."),
    "Item": lambda fake: fake.faker.sentence(nb_words=6).rstrip("."),
    "Item_Name": lambda fake: fake.faker.sentence(nb_words=6).rstrip("."),
    "Name": lambda fake: fake.faker.name(),
    "Customer_ID": lambda fake: fake.faker.numerify("####"),
    "Requestor_ID": lambda fake: fake.faker.numerify("####"),
    "Identifier": lambda fake: fake.faker.numerify("0000-000#-####-####"),
    "Value": lambda fake: fake.faker.bothify("??-#######").upper(),
    "Access_Method": lambda fake: fake.rng.choice(["Regular", "TDM"]),
    "Description": lambda fake: fake.faker.sentence(),
    "Note": lambda fake: fake.faker.sentence(),
    "Notes": lambda fake: fake.faker.sentence(),
    "Alert": lambda fake: fake.faker.sentence(),
}


class DescribedSchema(Protocol):
    """Anything carrying the JSON Schema of a single generated value."""

    description: Dict[str, Any]


def register_pattern(pattern: str) -> Callable[[ValueFactory], ValueFactory]:
    """Register a value factory for strings constrained by ``pattern``."""

    def decorator(func: ValueFactory) -> ValueFactory:
        PATTERN_GENERATORS[pattern] = func
        return func

    return decorator


def fingerprint(description: Dict[str, Any]) -> str:
    """Stable content hash of a schema description."""
    canonical = json.dumps(description, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class SchemaCache:
    """Append-only store of compiled descriptions keyed by fingerprint.

    Entries are populated lazily and never evicted or mutated once stored, so
    readers need no lock. Two requests racing on the same key compute
    equivalent values and the first stored one is kept.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Dict[str, Any]] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        return self._entries.get(key)

    def populate(self, key: str, factory: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries.setdefault(key, factory())
            logger.debug("schema_cache.populate", extra={"fingerprint": key, "entries": len(self._entries)})
        return entry


def compile_description(description: Dict[str, Any]) -> Dict[str, Any]:
    """Inline ``$ref`` targets and collapse nullable unions into plain nodes."""
    return _compile(description, description.get("$defs", {}), frozenset())


def _compile(node: Dict[str, Any], defs: Dict[str, Any], stack: FrozenSet[str]) -> Dict[str, Any]:
    if "$ref" in node:
        name = node["$ref"].rsplit("/", 1)[-1]
        if name in stack:
            raise GenerationError(f"Cyclic reference to '{name}'")
        if name not in defs:
            raise GenerationError(f"Unresolvable reference '{node['$ref']}'")
        target = _compile(defs[name], defs, stack | {name})
        siblings = {key: value for key, value in node.items() if key != "$ref"}
        if siblings:
            return {**target, **_compile(siblings, defs, stack)}
        return target

    compiled: Dict[str, Any] = {}
    for key, value in node.items():
        if key in ("$defs", "title", "description", "default"):
            continue
        if key == "properties":
            compiled[key] = {prop: _compile(sub, defs, stack) for prop, sub in value.items()}
        elif key == "items" and isinstance(value, dict):
            compiled[key] = _compile(value, defs, stack)
        elif key in ("anyOf", "oneOf", "allOf"):
            compiled[key] = [_compile(branch, defs, stack) for branch in value]
        else:
            compiled[key] = value

    for key in ("anyOf", "oneOf"):
        branches = compiled.get(key)
        if not branches:
            continue
        concrete = [branch for branch in branches if branch.get("type") != "null"]
        if len(concrete) == len(branches):
            continue
        del compiled[key]
        compiled["nullable"] = True
        if len(concrete) == 1:
            compiled = {**concrete[0], **compiled}
        elif concrete:
            compiled[key] = concrete
        else:
            compiled["type"] = "null"

    all_of = compiled.pop("allOf", None)
    if all_of:
        merged: Dict[str, Any] = {}
        for branch in all_of:
            merged.update(branch)
        compiled = {**merged, **compiled}
    return compiled


class SchemaFaker:
    """Draws values satisfying a compiled description."""

    def __init__(
        self,
        rng: random.Random,
        faker: Faker,
        extra_items: int = 3,
        optional_probability: float = 0.5,
    ) -> None:
        self.rng = rng
        self.faker = faker
        self.extra_items = extra_items
        self.optional_probability = optional_probability

    def value(self, node: Dict[str, Any], name: Optional[str] = None) -> Any:
        if "const" in node:
            return node["const"]
        if "enum" in node:
            if not node["enum"]:
                raise GenerationError(f"Empty enum for '{name or 'value'}'")
            return self.rng.choice(node["enum"])
        for key in ("anyOf", "oneOf"):
            if node.get(key):
                return self.value(self.rng.choice(node[key]), name)

        kind = node.get("type")
        if isinstance(kind, list):
            concrete = [option for option in kind if option != "null"]
            kind = self.rng.choice(concrete) if concrete else "null"
        if kind == "object":
            return self.object(node)
        if kind == "array":
            return self.array(node, name)
        if kind == "string":
            return self.string(node, name)
        if kind == "integer":
            return self.integer(node, name)
        if kind == "number":
            return self.number(node, name)
        if kind == "boolean":
            return self.rng.random() < 0.5
        if kind == "null":
            return None
        raise GenerationError(f"Unsupported schema type {kind!r} for '{name or 'value'}'")

    def object(self, node: Dict[str, Any]) -> Dict[str, Any]:
        required = set(node.get("required", []))
        result: Dict[str, Any] = {}
        for prop, sub in node.get("properties", {}).items():
            if prop in required or self.rng.random() < self.optional_probability:
                result[prop] = self.value(sub, prop)
        missing = required - set(result)
        if missing:
            raise GenerationError(f"Required properties without schema: {sorted(missing)}")
        return result

    def array(self, node: Dict[str, Any], name: Optional[str] = None, extra_items: Optional[int] = None) -> List[Any]:
        min_items = node.get("minItems", 0)
        max_items = node.get("maxItems")
        if max_items is not None and max_items < min_items:
            raise GenerationError(f"'{name or 'array'}' requires {min_items} items but allows at most {max_items}")
        upper = min_items + (self.extra_items if extra_items is None else extra_items)
        if max_items is not None:
            upper = min(upper, max_items)
        count = self.rng.randint(min_items, upper)
        items = node.get("items", {})
        return [self.value(items, name) for _ in range(count)]

    def string(self, node: Dict[str, Any], name: Optional[str] = None) -> str:
        pattern = node.get("pattern")
        if pattern is not None:
            factory = PATTERN_GENERATORS.get(pattern)
            if factory is None:
                raise GenerationError(f"No generator registered for pattern {pattern!r}")
            value = factory(self)
            if not re.search(pattern, value):
                raise GenerationError(f"Generated value {value!r} does not match {pattern!r}")
            return value

        fmt = node.get("format")
        if fmt is not None:
            factory = FORMAT_GENERATORS.get(fmt)
            if factory is None:
                raise GenerationError(f"Unsupported string format {fmt!r} for '{name or 'value'}'")
            return factory(self)

        factory = STRING_HINTS.get(name or "")
        value = factory(self) if factory else self.faker.word()
        min_length = node.get("minLength", 0)
        max_length = node.get("maxLength")
        if max_length is not None and max_length < min_length:
            raise GenerationError(f"'{name or 'value'}' has minLength {min_length} above maxLength {max_length}")
        if len(value) < min_length:
            value += self.faker.pystr(min_chars=min_length - len(value), max_chars=min_length - len(value))
        if max_length is not None:
            value = value[:max_length]
        return value

    def integer(self, node: Dict[str, Any], name: Optional[str] = None) -> int:
        low, high = self._bounds(node, name, step=1)
        return self.rng.randint(int(low), int(high))

    def number(self, node: Dict[str, Any], name: Optional[str] = None) -> float:
        low, high = self._bounds(node, name, step=0)
        return self.rng.uniform(low, high)

    @staticmethod
    def _bounds(node: Dict[str, Any], name: Optional[str], step: int) -> tuple[float, float]:
        low = node.get("minimum")
        if "exclusiveMinimum" in node:
            low = node["exclusiveMinimum"] + step
        high = node.get("maximum")
        if "exclusiveMaximum" in node:
            high = node["exclusiveMaximum"] - step
        if low is None:
            low = 0 if high is None else min(0, high)
        if high is None:
            high = max(low, 0) + 500
        if low > high:
            raise GenerationError(f"'{name or 'value'}' has an empty range [{low}, {high}]")
        return low, high


class FakeDataGenerator:
    """Produces lists of values conformant to a described schema."""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        faker: Optional[Faker] = None,
        cache: Optional[SchemaCache] = None,
        extra_items: int = 10,
        optional_probability: float = 0.5,
    ) -> None:
        self.rng = rng or random.Random()
        if faker is None:
            faker = Faker()
            faker.seed_instance(self.rng.getrandbits(32))
        self.cache = cache if cache is not None else SchemaCache()
        self.extra_items = extra_items
        self.synthesizer = SchemaFaker(self.rng, faker, optional_probability=optional_probability)

    @staticmethod
    def describe(schema: DescribedSchema, min_items: int = 0, max_items: Optional[int] = None) -> Dict[str, Any]:
        """Array description of ``schema`` with the requested cardinality."""
        item = {key: value for key, value in schema.description.items() if key != "$defs"}
        description: Dict[str, Any] = {"type": "array", "items": item, "minItems": min_items}
        if max_items is not None:
            description["maxItems"] = max_items
        if "$defs" in schema.description:
            description["$defs"] = schema.description["$defs"]
        return description

    def compiled(self, description: Dict[str, Any]) -> Dict[str, Any]:
        return self.cache.populate(fingerprint(description), lambda: compile_description(description))

    def generate(self, schema: DescribedSchema, min_items: int = 0, max_items: Optional[int] = None) -> List[Any]:
        if min_items < 0:
            raise GenerationError(f"Minimum item count must not be negative, got {min_items}")
        compiled = self.compiled(self.describe(schema, min_items, max_items))
        items = self.synthesizer.array(compiled, extra_items=self.extra_items)
        if len(items) < min_items:
            raise GenerationError(f"Generated {len(items)} items, at least {min_items} required")
        return items

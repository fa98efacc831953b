from __future__ import annotations

import pytest

from metascan.core.errors import NotFoundError
from metascan.core.kind import KindSchema
from metascan.core.kind_registry import KindRegistry, MetadataKind, kind_registry, metadata_kind


def test_class_body_becomes_field_specs() -> None:
    @metadata_kind(name="test_kind_registry.Feature", target=("type", "operation"))
    class Feature:
        reason: str
        alternative: str = "None"

    assert isinstance(Feature, MetadataKind)
    schema = kind_registry.get("test_kind_registry.Feature")
    assert schema is Feature.schema
    assert [(f.name, f.type, f.required) for f in schema.fields] == [
        ("reason", str, True),
        ("alternative", str, False),
    ]
    assert schema.get_field("alternative").default == "None"
    assert schema.targets == frozenset({"type", "operation"})
    assert schema.repeatable is False


def test_bare_decorator_uses_class_name() -> None:
    @metadata_kind
    class TestKindRegistryBare:
        value: int = 0

    assert TestKindRegistryBare.name == "TestKindRegistryBare"
    assert "TestKindRegistryBare" in kind_registry


def test_default_must_match_field_type() -> None:
    with pytest.raises(TypeError):

        @metadata_kind(name="test_kind_registry.BadDefault")
        class BadDefault:
            priority: int = "high"


def test_field_annotation_must_be_a_class() -> None:
    with pytest.raises(TypeError):

        @metadata_kind(name="test_kind_registry.BadAnnotation")
        class BadAnnotation:
            tags: list[str]


def test_get_unknown_kind_raises_not_found() -> None:
    registry = KindRegistry()
    with pytest.raises(NotFoundError):
        registry.get("missing")
    with pytest.raises(NotFoundError):
        registry["missing"]


def test_overwrite_false_rejects_duplicate_name() -> None:
    registry = KindRegistry()
    registry._register(KindSchema(name="dup"))
    with pytest.raises(ValueError):
        registry._register(KindSchema(name="dup"), overwrite=False)


def test_overwrite_keeps_first_registration_order() -> None:
    registry = KindRegistry()
    registry._register(KindSchema(name="a"))
    registry._register(KindSchema(name="b"))
    replacement = KindSchema(name="a", repeatable=True)
    registry._register(replacement)

    assert registry.order_of("a") == 0
    assert registry.order_of("b") == 1
    assert registry.get("a") is replacement


def test_resolve_accepts_handle_schema_and_name() -> None:
    @metadata_kind(name="test_kind_registry.Resolve")
    class Resolve:
        pass

    assert kind_registry.resolve(Resolve) is Resolve.schema
    assert kind_registry.resolve(Resolve.schema) is Resolve.schema
    assert kind_registry.resolve("test_kind_registry.Resolve") is Resolve.schema
    with pytest.raises(NotFoundError):
        kind_registry.resolve(KindSchema(name="test_kind_registry.Unregistered"))
    with pytest.raises(TypeError):
        kind_registry.resolve(3)  # type: ignore[arg-type]

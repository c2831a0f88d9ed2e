import pytest
from graphql import GraphQLBoolean, GraphQLField, GraphQLFloat, GraphQLInt, GraphQLObjectType, GraphQLString

from resolverql import BUILTIN_SCALARS, RegistrySealedError, TypeNotFound, TypeRegistry


def _object(name: str) -> GraphQLObjectType:
    return GraphQLObjectType(name, {"id": GraphQLField(GraphQLInt)})


@pytest.mark.parametrize(
    "name, expected",
    [
        ("string", GraphQLString),
        ("String", GraphQLString),
        ("int", GraphQLInt),
        ("Int", GraphQLInt),
        ("bool", GraphQLBoolean),
        ("Boolean", GraphQLBoolean),
        ("float", GraphQLFloat),
        ("Float", GraphQLFloat),
    ],
)
def test_builtin_aliases(name, expected):
    assert TypeRegistry().resolve_by_name(name) is expected


def test_unknown_name_raises_type_not_found():
    registry = TypeRegistry()
    with pytest.raises(TypeNotFound) as exc:
        registry.resolve_by_name("Nope")
    assert exc.value.type_name == "Nope"
    assert exc.value.message == "Type 'Nope' is not found!"


def test_lookup_is_case_sensitive_for_custom_types():
    registry = TypeRegistry()
    registry.register(_object("User"))
    with pytest.raises(TypeNotFound):
        registry.resolve_by_name("user")


def test_registered_type_is_returned():
    registry = TypeRegistry()
    user = _object("User")
    registry.register(user)
    assert registry.resolve_by_name("User") is user
    assert "User" in registry
    assert "string" in registry
    assert len(registry) == 1


def test_last_registration_wins():
    registry = TypeRegistry()
    first, second = _object("User"), _object("User")
    registry.register(first)
    registry.register(second)
    assert registry.resolve_by_name("User") is second
    assert registry.types() == [second]


def test_types_keep_registration_order():
    registry = TypeRegistry()
    a, b, c = _object("A"), _object("B"), _object("C")
    for t in (b, a, c):
        registry.register(t)
    assert [t.name for t in registry.types()] == ["B", "A", "C"]
    assert list(registry) == ["B", "A", "C"]


def test_sealed_registry_rejects_registration_but_resolves():
    registry = TypeRegistry()
    user = _object("User")
    registry.register(user)
    registry.seal()
    assert registry.sealed
    with pytest.raises(RegistrySealedError):
        registry.register(_object("Other"))
    assert registry.resolve_by_name("User") is user


def test_builtin_table_is_not_affected_by_custom_types():
    registry = TypeRegistry()
    registry.register(_object("Custom"))
    assert "Custom" not in BUILTIN_SCALARS

"""
SchemaNode — декларативное описание бинарной раскладки датума

Закрытый набор узлов:
- Constructor(tag, fields) — конструктор с числовым тегом и позиционными полями
- BytesField(key) — лист-байтстрока
- IntField(key) — лист-целое произвольной точности
- BoolField(key) — Bool, на цепи это конструктор без полей (False/True теги)
- OptionalField(inner) — Option, на цепи конструктор: some(inner) | none()

Узлы неизменяемы (frozen dataclass): одно дерево разделяется всеми вызовами
push/pull и никогда не модифицируется.

ИНВАРИАНТЫ:
1. Позиция поля определяет его смысл; имена полей на цепи отсутствуют
2. Ключ параметра встречается в схеме не более одного раза
3. Внутренняя схема OptionalField содержит хотя бы один обязательный ключ
   (по нему push определяет вариант some/none)
"""

from dataclasses import dataclass
from typing import Any, Final, FrozenSet, Iterator, Mapping, Optional, Tuple, Union

from src.core.datum.parameters import DatumParameterKey
from src.core.errors import InvalidDefinition


# =============================================================================
# CONSTANTS
# =============================================================================

# Option в Aiken / PlutusTx: Some = 0, None = 1
OPTION_SOME_TAG: Final[int] = 0
OPTION_NONE_TAG: Final[int] = 1

# Bool: False = 0, True = 1
BOOL_FALSE_TAG: Final[int] = 0
BOOL_TRUE_TAG: Final[int] = 1


def _check_tag(tag: Any, what: str) -> None:
    if isinstance(tag, bool) or not isinstance(tag, int) or tag < 0:
        raise InvalidDefinition(f"{what} must be a non-negative int, got {tag!r}")


def _check_key(key: Any) -> None:
    if not isinstance(key, str) or not key:
        raise InvalidDefinition(f"Parameter key must be a non-empty str, got {key!r}")


# =============================================================================
# NODES
# =============================================================================


@dataclass(frozen=True)
class Constructor:
    """Конструктор: тег + позиционно упорядоченные дочерние узлы."""

    tag: int
    fields: Tuple["SchemaNode", ...] = ()

    def __post_init__(self) -> None:
        _check_tag(self.tag, "Constructor tag")
        object.__setattr__(self, "fields", tuple(self.fields))
        for child in self.fields:
            if not isinstance(child, SCHEMA_NODE_TYPES):
                raise InvalidDefinition(f"Unsupported schema node: {child!r}")


@dataclass(frozen=True)
class BytesField:
    """Лист: сырая байтстрока."""

    key: str

    def __post_init__(self) -> None:
        _check_key(self.key)


@dataclass(frozen=True)
class IntField:
    """Лист: целое произвольной точности."""

    key: str

    def __post_init__(self) -> None:
        _check_key(self.key)


@dataclass(frozen=True)
class BoolField:
    """Лист: Bool, кодируется пустым конструктором с тегом false_tag/true_tag."""

    key: str
    false_tag: int = BOOL_FALSE_TAG
    true_tag: int = BOOL_TRUE_TAG

    def __post_init__(self) -> None:
        _check_key(self.key)
        _check_tag(self.false_tag, "BoolField false_tag")
        _check_tag(self.true_tag, "BoolField true_tag")
        if self.false_tag == self.true_tag:
            raise InvalidDefinition(f"BoolField '{self.key}': false_tag == true_tag")


@dataclass(frozen=True)
class OptionalField:
    """
    Option: конструктор some_tag с одним полем inner или none_tag без полей.

    Теги фиксируются для каждой схемы отдельно.
    """

    inner: "SchemaNode"
    some_tag: int = OPTION_SOME_TAG
    none_tag: int = OPTION_NONE_TAG

    def __post_init__(self) -> None:
        _check_tag(self.some_tag, "OptionalField some_tag")
        _check_tag(self.none_tag, "OptionalField none_tag")
        if self.some_tag == self.none_tag:
            raise InvalidDefinition("OptionalField: some_tag == none_tag")
        if not isinstance(self.inner, SCHEMA_NODE_TYPES):
            raise InvalidDefinition(f"Unsupported schema node: {self.inner!r}")


SchemaNode = Union[Constructor, BytesField, IntField, BoolField, OptionalField]
SCHEMA_NODE_TYPES: Final[tuple] = (Constructor, BytesField, IntField, BoolField, OptionalField)
LEAF_TYPES: Final[tuple] = (BytesField, IntField, BoolField)


# =============================================================================
# INTROSPECTION
# =============================================================================


def iter_keys(node: SchemaNode) -> Iterator[str]:
    """Все ключи схемы в порядке обхода (включая ключи внутри Option)."""
    if isinstance(node, LEAF_TYPES):
        yield node.key
    elif isinstance(node, Constructor):
        for child in node.fields:
            yield from iter_keys(child)
    elif isinstance(node, OptionalField):
        yield from iter_keys(node.inner)


def schema_keys(node: SchemaNode) -> FrozenSet[str]:
    """Множество всех ключей схемы."""
    return frozenset(iter_keys(node))


def required_keys(node: SchemaNode) -> FrozenSet[str]:
    """Ключи, обязательные для push (не лежащие внутри OptionalField)."""
    if isinstance(node, LEAF_TYPES):
        return frozenset((node.key,))
    if isinstance(node, Constructor):
        keys: FrozenSet[str] = frozenset()
        for child in node.fields:
            keys |= required_keys(child)
        return keys
    return frozenset()


def validate_schema(node: SchemaNode) -> None:
    """
    Проверка инвариантов дерева схемы.

    Raises:
        InvalidDefinition: дублирующиеся ключи или Option без обязательного ключа
    """
    seen = set()
    for key in iter_keys(node):
        if key in seen:
            raise InvalidDefinition(f"Parameter key '{key}' is used more than once")
        seen.add(key)
    _validate_optionals(node)


def _validate_optionals(node: SchemaNode) -> None:
    if isinstance(node, Constructor):
        for child in node.fields:
            _validate_optionals(child)
    elif isinstance(node, OptionalField):
        if not required_keys(node.inner):
            raise InvalidDefinition(
                "OptionalField inner schema must contain at least one non-optional key"
            )
        _validate_optionals(node.inner)


# =============================================================================
# DEFINITION → SCHEMA
# =============================================================================


def schema_from_definition(
    definition: Mapping[str, Any],
    known_keys: Optional[FrozenSet[str]] = None,
) -> SchemaNode:
    """
    Построение дерева SchemaNode из описания-словаря.

    Формат описания:
        {"constructor": 0, "fields": [...]}
        {"bytes": "SwapInTokenPolicyId"}
        {"int": "SwapInAmount"}
        {"bool": "IsActive", "false": 0, "true": 1}
        {"optional": {...}, "some": 0, "none": 1}

    Args:
        definition: Описание схемы
        known_keys: Допустимые ключи (по умолчанию — DatumParameterKey)

    Returns:
        Корневой узел схемы

    Raises:
        InvalidDefinition: Если описание некорректно
    """
    if known_keys is None:
        known_keys = DatumParameterKey.all_keys()

    root = _node_from_definition(definition, known_keys)
    validate_schema(root)
    return root


def _node_from_definition(definition: Any, known_keys: FrozenSet[str]) -> SchemaNode:
    if not isinstance(definition, Mapping):
        raise InvalidDefinition(f"Schema node must be a mapping, got {definition!r}")

    if "constructor" in definition:
        fields = definition.get("fields", [])
        if not isinstance(fields, (list, tuple)):
            raise InvalidDefinition("Constructor 'fields' must be a list")
        return Constructor(
            tag=definition["constructor"],
            fields=tuple(_node_from_definition(child, known_keys) for child in fields),
        )

    if "optional" in definition:
        return OptionalField(
            inner=_node_from_definition(definition["optional"], known_keys),
            some_tag=definition.get("some", OPTION_SOME_TAG),
            none_tag=definition.get("none", OPTION_NONE_TAG),
        )

    for leaf_name, leaf_type in (("bytes", BytesField), ("int", IntField)):
        if leaf_name in definition:
            key = definition[leaf_name]
            _check_known(key, known_keys)
            return leaf_type(key=key)

    if "bool" in definition:
        key = definition["bool"]
        _check_known(key, known_keys)
        return BoolField(
            key=key,
            false_tag=definition.get("false", BOOL_FALSE_TAG),
            true_tag=definition.get("true", BOOL_TRUE_TAG),
        )

    raise InvalidDefinition(f"Unrecognised schema node: {dict(definition)!r}")


def _check_known(key: Any, known_keys: FrozenSet[str]) -> None:
    if key not in known_keys:
        raise InvalidDefinition(f"Unknown parameter key: {key!r}")

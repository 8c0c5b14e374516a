"""
DatumCodec — двунаправленный движок push/pull над SchemaNode

push: ParameterTable → PlutusData (подстановка параметров в схему)
pull: PlutusData → ParameterTable (извлечение параметров по схеме)

ЗАКОНЫ (для любой схемы S):
1. pull(push(P)) == P для любой ParameterTable P, валидной для S
2. push(pull(D)) == D для любого датума D, полученного push по S
   (альтернативные кодировки одного значения не принимаются)

Любое структурное расхождение — ошибка (SchemaMismatch), никогда не
"лучшая догадка". Частичная ParameterTable наружу не возвращается.

Кодек не имеет изменяемого состояния: один экземпляр безопасно
используется любым числом параллельных вызовов.
"""

from typing import FrozenSet, Mapping, Tuple

from src.core.datum.parameters import ParameterTable, ParameterValue
from src.core.datum.plutus_data import MAX_BYTES_LENGTH, Constr, PlutusData, from_hex, to_hex
from src.core.datum.schema import (
    BoolField,
    BytesField,
    Constructor,
    IntField,
    OptionalField,
    SchemaNode,
    required_keys,
    schema_keys,
    validate_schema,
)
from src.core.errors import InvalidParameter, MissingParameter, SchemaMismatch


Path = Tuple[int, ...]


def _kind(value: object) -> str:
    if isinstance(value, Constr):
        return f"Constr({value.tag}, arity={len(value.fields)})"
    return type(value).__name__


class DatumCodec:
    """
    Кодек датумов для одной схемы.

    Args:
        schema: Корневой узел схемы (неизменяемый)
        strict_wire: pull принимает только каноническую CBOR форму
    """

    def __init__(self, schema: SchemaNode, strict_wire: bool = True):
        validate_schema(schema)
        self._schema = schema
        self._keys = schema_keys(schema)
        self._strict_wire = strict_wire

    @property
    def schema(self) -> SchemaNode:
        return self._schema

    @property
    def keys(self) -> FrozenSet[str]:
        """Ключи, которые понимает схема."""
        return self._keys

    @property
    def required_keys(self) -> FrozenSet[str]:
        """Ключи, без которых push невозможен."""
        return required_keys(self._schema)

    # =========================================================================
    # PUSH
    # =========================================================================

    def push_datum(self, params: Mapping[str, ParameterValue]) -> PlutusData:
        """
        Сборка датума из параметров.

        Raises:
            MissingParameter: Нет обязательного ключа
            InvalidParameter: Ключ не объявлен в схеме или значение неверного типа
        """
        unknown = sorted(set(params) - self._keys)
        if unknown:
            raise InvalidParameter(unknown[0], "key is not declared by this schema")
        return self._push(self._schema, params, ())

    def push(self, params: Mapping[str, ParameterValue]) -> str:
        """Сборка датума и сериализация в CBOR hex."""
        return to_hex(self.push_datum(params))

    def _push(self, node: SchemaNode, params: Mapping[str, ParameterValue], path: Path) -> PlutusData:
        if isinstance(node, Constructor):
            return Constr(
                node.tag,
                tuple(self._push(child, params, path + (i,)) for i, child in enumerate(node.fields)),
            )

        if isinstance(node, OptionalField):
            # ни одного ключа внутри Option → none; частично заданный → MissingParameter
            if not any(key in params for key in schema_keys(node.inner)):
                return Constr(node.none_tag, ())
            return Constr(node.some_tag, (self._push(node.inner, params, path + (0,)),))

        if node.key not in params:
            raise MissingParameter(node.key, path)
        value = params[node.key]

        if isinstance(node, BytesField):
            if not isinstance(value, bytes):
                raise InvalidParameter(node.key, f"expected bytes, got {type(value).__name__}", path)
            if len(value) > MAX_BYTES_LENGTH:
                raise InvalidParameter(
                    node.key, f"byte string of {len(value)} bytes exceeds {MAX_BYTES_LENGTH}", path
                )
            return value

        if isinstance(node, IntField):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidParameter(node.key, f"expected int, got {type(value).__name__}", path)
            return value

        if isinstance(node, BoolField):
            if not isinstance(value, bool):
                raise InvalidParameter(node.key, f"expected bool, got {type(value).__name__}", path)
            return Constr(node.true_tag if value else node.false_tag, ())

        raise TypeError(f"Unsupported schema node: {node!r}")

    # =========================================================================
    # PULL
    # =========================================================================

    def pull_datum(self, datum: PlutusData) -> ParameterTable:
        """
        Извлечение параметров из датума.

        Raises:
            SchemaMismatch: Тег, арность или тип листа не совпадают со схемой
        """
        params: ParameterTable = {}
        self._pull(self._schema, datum, (), params)
        return params

    def pull(self, datum_hex: str) -> ParameterTable:
        """
        Декодирование CBOR hex и извлечение параметров.

        Raises:
            MalformedWire: hex/CBOR повреждён
            SchemaMismatch: Структура не совпадает со схемой
        """
        return self.pull_datum(from_hex(datum_hex, strict=self._strict_wire))

    def _pull(self, node: SchemaNode, datum: PlutusData, path: Path, out: ParameterTable) -> None:
        if isinstance(node, Constructor):
            self._expect_constr(datum, path, node.tag, len(node.fields))
            for i, (child, value) in enumerate(zip(node.fields, datum.fields)):
                self._pull(child, value, path + (i,), out)
            return

        if isinstance(node, OptionalField):
            if not isinstance(datum, Constr):
                raise SchemaMismatch("Expected Option constructor", path, "Constr", _kind(datum))
            if datum.tag == node.none_tag:
                self._expect_constr(datum, path, node.none_tag, 0)
                return
            self._expect_constr(datum, path, node.some_tag, 1)
            self._pull(node.inner, datum.fields[0], path + (0,), out)
            return

        if isinstance(node, BytesField):
            if not isinstance(datum, bytes):
                raise SchemaMismatch(f"Leaf '{node.key}' kind mismatch", path, "bytes", _kind(datum))
            out[node.key] = datum
            return

        if isinstance(node, IntField):
            if isinstance(datum, bool) or not isinstance(datum, int):
                raise SchemaMismatch(f"Leaf '{node.key}' kind mismatch", path, "int", _kind(datum))
            out[node.key] = datum
            return

        if isinstance(node, BoolField):
            if not isinstance(datum, Constr) or datum.tag not in (node.false_tag, node.true_tag):
                raise SchemaMismatch(
                    f"Leaf '{node.key}' kind mismatch",
                    path,
                    f"Constr({node.false_tag}|{node.true_tag})",
                    _kind(datum),
                )
            self._expect_constr(datum, path, datum.tag, 0)
            out[node.key] = datum.tag == node.true_tag
            return

        raise TypeError(f"Unsupported schema node: {node!r}")

    @staticmethod
    def _expect_constr(datum: PlutusData, path: Path, tag: int, arity: int) -> None:
        if not isinstance(datum, Constr):
            raise SchemaMismatch("Expected constructor", path, f"Constr({tag})", _kind(datum))
        if datum.tag != tag:
            raise SchemaMismatch("Constructor tag mismatch", path, tag, datum.tag)
        if len(datum.fields) != arity:
            raise SchemaMismatch("Constructor arity mismatch", path, arity, len(datum.fields))


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def load_schema(root: SchemaNode, strict_wire: bool = True) -> DatumCodec:
    """
    Загрузка схемы: проверка инвариантов и создание кодека.

    Raises:
        InvalidDefinition: Если схема нарушает инварианты
    """
    return DatumCodec(root, strict_wire=strict_wire)

"""
PlutusData — дерево значений датума и его CBOR wire-формат

EncodedDatum представлен закрытым набором типов:
- Constr(tag, fields) — конструктор с конкретным тегом и конкретными полями
- int — целое произвольной точности
- bytes — байтстрока

Wire-формат — CBOR (через cbor2), передаётся как hex строка:
- Constr с индексом 0..6     → CBOR tag 121 + i
- Constr с индексом 7..127   → CBOR tag 1280 + (i - 7)
- Constr с другим индексом   → CBOR tag 102 [i, fields]
- поля — массив определённой длины
- int сверх 64 бит — bignum (tag 2/3), это делает cbor2
- bytes — байтстрока определённой длины (кодек собирает листья не длиннее 64 байт)

Кодирование детерминированное: одно значение → одна байтовая строка.
В строгом режиме декодер принимает только эту каноническую форму.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import Any, Final, Tuple, Union

from cbor2 import CBORDecodeError, CBORDecoder, CBORTag, dumps

from src.core.errors import MalformedWire


# =============================================================================
# CBOR TAG CONSTANTS
# =============================================================================

CONSTR_TAG_BASE: Final[int] = 121  # индексы 0..6
CONSTR_TAG_EXTENDED_BASE: Final[int] = 1280  # индексы 7..127
CONSTR_TAG_GENERAL: Final[int] = 102  # любой индекс: [index, fields]

COMPACT_INDEX_MAX: Final[int] = 6
EXTENDED_INDEX_MAX: Final[int] = 127

# Максимальная длина байтстроки-листа (длиннее ledger требует разбиения на чанки)
MAX_BYTES_LENGTH: Final[int] = 64


# =============================================================================
# VALUE TREE
# =============================================================================


@dataclass(frozen=True)
class Constr:
    """Конструктор Plutus Data с конкретным тегом и полями."""

    tag: int
    fields: Tuple["PlutusData", ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.tag, bool) or not isinstance(self.tag, int) or self.tag < 0:
            raise ValueError(f"Constr tag must be a non-negative int, got {self.tag!r}")
        object.__setattr__(self, "fields", tuple(self.fields))


PlutusData = Union[Constr, int, bytes]


# =============================================================================
# ENCODING
# =============================================================================


def _to_cbor_object(value: PlutusData) -> Any:
    if isinstance(value, Constr):
        fields = [_to_cbor_object(field) for field in value.fields]
        if value.tag <= COMPACT_INDEX_MAX:
            return CBORTag(CONSTR_TAG_BASE + value.tag, fields)
        if value.tag <= EXTENDED_INDEX_MAX:
            return CBORTag(CONSTR_TAG_EXTENDED_BASE + value.tag - (COMPACT_INDEX_MAX + 1), fields)
        return CBORTag(CONSTR_TAG_GENERAL, [value.tag, fields])
    if isinstance(value, bool):
        raise TypeError("bool is not Plutus data; use Constr for Bool")
    if isinstance(value, (int, bytes)):
        return value
    raise TypeError(f"Unsupported Plutus data value: {type(value).__name__}")


def to_cbor(value: PlutusData) -> bytes:
    """Каноническое CBOR-представление значения."""
    return dumps(_to_cbor_object(value), canonical=True)


def to_hex(value: PlutusData) -> str:
    """Каноническое CBOR-представление значения в hex."""
    return to_cbor(value).hex()


# =============================================================================
# DECODING
# =============================================================================


def _constr_index(tag: int) -> int:
    if CONSTR_TAG_BASE <= tag <= CONSTR_TAG_BASE + COMPACT_INDEX_MAX:
        return tag - CONSTR_TAG_BASE
    if CONSTR_TAG_EXTENDED_BASE <= tag <= CONSTR_TAG_EXTENDED_BASE + (
        EXTENDED_INDEX_MAX - COMPACT_INDEX_MAX - 1
    ):
        return tag - CONSTR_TAG_EXTENDED_BASE + COMPACT_INDEX_MAX + 1
    raise MalformedWire(f"Unsupported CBOR tag {tag}")


def _from_cbor_object(obj: Any) -> PlutusData:
    if isinstance(obj, CBORTag):
        if obj.tag == CONSTR_TAG_GENERAL:
            value = obj.value
            if (
                not isinstance(value, (list, tuple))
                or len(value) != 2
                or isinstance(value[0], bool)
                or not isinstance(value[0], int)
                or value[0] < 0
                or not isinstance(value[1], (list, tuple))
            ):
                raise MalformedWire("Malformed general constructor (tag 102)")
            return Constr(value[0], tuple(_from_cbor_object(item) for item in value[1]))
        index = _constr_index(obj.tag)
        if not isinstance(obj.value, (list, tuple)):
            raise MalformedWire(f"Constructor tag {obj.tag} must wrap an array")
        return Constr(index, tuple(_from_cbor_object(item) for item in obj.value))
    if isinstance(obj, bool):
        raise MalformedWire("CBOR simple value true/false is not Plutus data")
    if isinstance(obj, (int, bytes)):
        return obj
    raise MalformedWire(f"Unsupported CBOR item: {type(obj).__name__}")


def from_cbor(raw: bytes, strict: bool = True) -> PlutusData:
    """
    Декодирование CBOR в дерево PlutusData.

    Args:
        raw: CBOR байты
        strict: Принимать только каноническую форму (ту, что выдаёт to_cbor)

    Returns:
        Дерево значений

    Raises:
        MalformedWire: Повреждённые/усечённые байты, лишние байты в конце,
            неподдерживаемые элементы, неканоническая форма (strict)
    """
    stream = BytesIO(raw)
    try:
        obj = CBORDecoder(stream).decode()
    except CBORDecodeError as e:
        raise MalformedWire(f"Corrupt CBOR: {e}") from e

    if stream.tell() != len(raw):
        raise MalformedWire(f"Trailing bytes after datum ({len(raw) - stream.tell()} bytes)")

    value = _from_cbor_object(obj)

    if strict and to_cbor(value) != raw:
        raise MalformedWire("Non-canonical datum encoding")

    return value


def from_hex(datum_hex: str, strict: bool = True) -> PlutusData:
    """Декодирование hex строки CBOR в дерево PlutusData."""
    if not isinstance(datum_hex, str):
        raise MalformedWire(f"Datum hex must be str, got {type(datum_hex).__name__}")
    try:
        raw = bytes.fromhex(datum_hex)
    except ValueError as e:
        raise MalformedWire(f"Invalid hex: {e}") from e
    if not raw:
        raise MalformedWire("Empty datum")
    return from_cbor(raw, strict=strict)

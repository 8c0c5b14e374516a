"""
Datum codec

Схемы датумов, таблицы параметров, дерево Plutus Data и кодек push/pull.
"""

from src.core.datum.codec import DatumCodec, load_schema
from src.core.datum.parameters import DatumParameterKey, ParameterTable, ParameterValue
from src.core.datum.plutus_data import Constr, PlutusData, from_cbor, from_hex, to_cbor, to_hex
from src.core.datum.schema import (
    OPTION_NONE_TAG,
    OPTION_SOME_TAG,
    BoolField,
    BytesField,
    Constructor,
    IntField,
    OptionalField,
    SchemaNode,
    required_keys,
    schema_from_definition,
    schema_keys,
    validate_schema,
)

__all__ = [
    # Codec
    "DatumCodec",
    "load_schema",
    # Parameters
    "DatumParameterKey",
    "ParameterTable",
    "ParameterValue",
    # Plutus Data
    "Constr",
    "PlutusData",
    "from_cbor",
    "from_hex",
    "to_cbor",
    "to_hex",
    # Schema
    "OPTION_NONE_TAG",
    "OPTION_SOME_TAG",
    "BoolField",
    "BytesField",
    "Constructor",
    "IntField",
    "OptionalField",
    "SchemaNode",
    "required_keys",
    "schema_from_definition",
    "schema_keys",
    "validate_schema",
]

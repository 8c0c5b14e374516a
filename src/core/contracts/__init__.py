"""
Contract Validation Module

Загрузка и валидация JSON описаний датумов.
"""

from .validators import (
    ContractValidator,
    DatumDefinitionValidator,
    SchemaLoader,
    load_definition,
    load_definition_codec,
    schema_from_contract,
    validate_datum_definition,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "DatumDefinitionValidator",
    # Functions
    "validate_datum_definition",
    "schema_from_contract",
    "load_definition",
    "load_definition_codec",
]

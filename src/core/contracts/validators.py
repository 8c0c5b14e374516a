"""
Datum Definition Contracts

Модуль загрузки и валидации описаний датумов (JSON) согласно формальному
JSON Schema контракту. Использует библиотеку jsonschema для проверки
соответствия описаний мета-схеме, затем строит дерево SchemaNode.

Схемы (contracts/schema/):
- datum_definition.json — мета-схема описания датума

Описания датумов (contracts/definitions/):
- saturnswap_order.json — SwapDatum ордера
- saturnswap_control.json — ControlDatum (LiquidityDatum, вариант 2)
- constant_product_pool.json — датум пула constant-product
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict

import jsonschema
from jsonschema import Draft202012Validator, ValidationError

from src.core.datum.codec import DatumCodec
from src.core.datum.schema import SchemaNode, schema_from_definition
from src.core.errors import InvalidDefinition


logger = logging.getLogger(__name__)

CONTRACTS_DIR = Path(__file__).parent


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON файлов контрактов.

    Находит файлы в каталоге относительно этого модуля (schema/ или
    definitions/) и кэширует их содержимое.
    """

    def __init__(self, directory: Path):
        self._dir = directory
        if not self._dir.exists():
            raise RuntimeError(f"Contracts directory not found: {self._dir}")

        # Кэш загруженных документов
        self._documents: Dict[str, Dict[str, Any]] = {}

    def load(self, name: str) -> Dict[str, Any]:
        """
        Загрузка JSON файла.

        Args:
            name: Имя файла без расширения (например, 'saturnswap_order')

        Returns:
            Загруженный документ как dict

        Raises:
            FileNotFoundError: Если файл не найден
            json.JSONDecodeError: Если файл не является валидным JSON
        """
        if name in self._documents:
            return self._documents[name]

        path = self._dir / f"{name}.json"
        if not path.exists():
            raise FileNotFoundError(f"Contract file not found: {path}")

        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)

        self._documents[name] = document
        return document

    def load_schema(self, name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema с мета-валидацией.

        Raises:
            ValueError: Если файл не является валидной JSON Schema
        """
        schema = self.load(name)
        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {name}.json: {e}")
        return schema


_SCHEMA_LOADER = SchemaLoader(CONTRACTS_DIR / "schema")
_DEFINITION_LOADER = SchemaLoader(CONTRACTS_DIR / "definitions")


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """
    Базовый класс для валидаторов контрактов.

    Инкапсулирует логику валидации данных против JSON Schema.
    """

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Валидация данных против схемы.

        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        """Проверка валидности данных без exception."""
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]):
        """Итератор по всем ошибкам валидации."""
        return self.validator.iter_errors(data)


class DatumDefinitionValidator(ContractValidator):
    """Валидатор описаний датумов (datum_definition.json)."""

    def __init__(self):
        super().__init__("datum_definition")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_datum_definition(data: Dict[str, Any]) -> None:
    """
    Валидация описания датума.

    Raises:
        ValidationError: Если описание не соответствует мета-схеме
    """
    DatumDefinitionValidator().validate(data)


def schema_from_contract(data: Dict[str, Any]) -> SchemaNode:
    """
    Построение SchemaNode из описания с предварительной валидацией.

    Raises:
        InvalidDefinition: Описание не проходит мета-схему или инварианты схемы
    """
    try:
        validate_datum_definition(data)
    except ValidationError as e:
        raise InvalidDefinition(f"Datum definition violates contract: {e.message}") from e
    return schema_from_definition(data)


def load_definition(name: str) -> SchemaNode:
    """
    Загрузка упакованного описания датума по имени.

    Args:
        name: Имя описания (например, 'saturnswap_order')

    Raises:
        FileNotFoundError: Описание не найдено
        InvalidDefinition: Описание некорректно
    """
    schema = schema_from_contract(_DEFINITION_LOADER.load(name))
    logger.debug(
        f"Datum definition '{name}' loaded",
        extra={"event": "datum.definition_loaded", "definition": name},
    )
    return schema


def load_definition_codec(name: str, strict_wire: bool = True) -> DatumCodec:
    """Кодек для упакованного описания датума."""
    return DatumCodec(load_definition(name), strict_wire=strict_wire)

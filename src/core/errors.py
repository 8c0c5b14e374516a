"""
Errors — типизированная иерархия ошибок ядра

Все ошибки ядра наследуются от DexCoreError и поднимаются вызывающему коду
как есть: ядро никогда не подменяет ошибку значением по умолчанию и никогда
не повторяет операцию.

Таксономия:
- MissingParameter / InvalidParameter — push (сборка датума)
- SchemaMismatch — pull (структура датума не совпадает со схемой)
- MalformedWire — повреждённый/усечённый CBOR hex
- InvalidDefinition — некорректное описание схемы датума
- InsufficientLiquidity — пул не может выдать запрошенный объём
- OrderNotFound — ордер для отмены не найден среди выходов
- ConfigurationError — не задана конфигурация коннектора (депозит и т.п.)
"""

from typing import Any, Optional, Sequence


class DexCoreError(Exception):
    """Базовая ошибка ядра."""


# =============================================================================
# DATUM CODEC
# =============================================================================


def format_path(path: Sequence[int]) -> str:
    """Путь узла схемы в читаемом виде: root.fields[8].fields[1]"""
    return "root" + "".join(f".fields[{i}]" for i in path)


class DatumError(DexCoreError):
    """Базовая ошибка кодека датумов."""


class MissingParameter(DatumError):
    """В ParameterTable нет ключа, обязательного для схемы."""

    def __init__(self, key: str, path: Sequence[int] = ()):
        self.key = key
        self.path = tuple(path)
        super().__init__(f"Missing parameter '{key}' at {format_path(self.path)}")


class InvalidParameter(DatumError):
    """Значение параметра неверного типа или ключ не объявлен в схеме."""

    def __init__(self, key: str, reason: str, path: Sequence[int] = ()):
        self.key = key
        self.reason = reason
        self.path = tuple(path)
        super().__init__(f"Invalid parameter '{key}' at {format_path(self.path)}: {reason}")


class SchemaMismatch(DatumError):
    """Структура датума расходится со схемой (тег, арность, тип листа)."""

    def __init__(
        self,
        reason: str,
        path: Sequence[int] = (),
        expected: Optional[Any] = None,
        actual: Optional[Any] = None,
    ):
        self.reason = reason
        self.path = tuple(path)
        self.expected = expected
        self.actual = actual
        message = f"{reason} at {format_path(self.path)}"
        if expected is not None or actual is not None:
            message += f" (expected {expected!r}, got {actual!r})"
        super().__init__(message)


class MalformedWire(DatumError):
    """Wire-представление (hex/CBOR) повреждено или не поддерживается."""


class InvalidDefinition(DatumError):
    """Описание схемы датума некорректно."""


# =============================================================================
# SWAP MATH / LIFECYCLE
# =============================================================================


class InsufficientLiquidity(DexCoreError, ValueError):
    """Резервов пула недостаточно для запрошенного обмена."""


class OrderNotFound(DexCoreError, LookupError):
    """Среди переданных выходов нет UTxO по адресу ордер-контракта."""


class ConfigurationError(DexCoreError):
    """Конфигурация коннектора неполна (например, не задан депозит)."""

"""Connectors — коннекторы DEX поверх ядра (кодек датумов + swap math).

Коннектор строит payload для внешнего сборщика транзакций; сеть, подпись и
выбор UTxO находятся вне ядра.
"""

from .base import BaseDex, DataProvider

__all__ = [
    "BaseDex",
    "DataProvider",
]

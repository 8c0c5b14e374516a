"""
UTxO — Модели выходов транзакций и инструкций для сборщика транзакций

Все модели immutable (frozen=True): построение payload никогда не изменяет
переданные выходы.
"""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, Field, StrictInt

from src.core.domain.asset import Token


# =============================================================================
# ENUMS
# =============================================================================


class AddressType(str, Enum):
    """Тип адреса получателя."""

    BASE = "base"
    ENTERPRISE = "enterprise"
    CONTRACT = "contract"


# =============================================================================
# MODELS
# =============================================================================


class AssetBalance(BaseModel):
    """Количество одного токена."""

    asset: Token
    quantity: StrictInt = Field(..., ge=0)

    model_config = {"frozen": True}


class UTxO(BaseModel):
    """Непотраченный выход транзакции."""

    address: str = Field(..., min_length=1)
    tx_hash: str = Field(..., pattern=r"^[0-9a-f]{64}$")
    output_index: StrictInt = Field(..., ge=0)
    asset_balances: Tuple[AssetBalance, ...] = ()
    datum_hash: Optional[str] = None
    datum: Optional[str] = Field(None, description="Inline datum (CBOR hex)")

    model_config = {"frozen": True}


class Script(BaseModel):
    """Plutus валидатор."""

    type: str = Field("PlutusV2", description="PlutusV1 | PlutusV2 | PlutusV3")
    script: str = Field(..., min_length=1, description="CBOR скрипта или его hash")

    model_config = {"frozen": True}


class SpendUTxO(BaseModel):
    """Инструкция потратить скриптовый UTxO с redeemer."""

    utxo: UTxO
    redeemer: Optional[str] = Field(None, description="Redeemer (CBOR hex)")
    validator: Optional[Script] = None
    signer: Optional[str] = None

    model_config = {"frozen": True}


class PayToAddress(BaseModel):
    """Инструкция для сборщика транзакций: выход на адрес."""

    address: str = Field(..., min_length=1)
    address_type: AddressType
    value: Tuple[AssetBalance, ...] = ()
    datum_hex: Optional[str] = None
    is_inline_datum: bool = False
    spend_utxos: Tuple[SpendUTxO, ...] = ()

    model_config = {"frozen": True}


class SwapFee(BaseModel):
    """Комиссия/депозит ордера."""

    id: str = Field(..., min_length=1)
    title: str = ""
    description: str = ""
    value: StrictInt = Field(..., ge=0, description="Сумма в lovelace")
    is_returned: bool = False

    model_config = {"frozen": True}

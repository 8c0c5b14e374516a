"""
SaturnSwapConfig — конфигурация коннектора SaturnSwap

Адреса, хэши скриптов, redeemer отмены и расписание комиссий передаются
коннектору явно при создании (никаких глобальных таблиц).
"""

import json
from pathlib import Path
from typing import Final, Tuple, Union

from pydantic import BaseModel, Field, StrictInt, field_validator

from src.core.datum.plutus_data import from_hex
from src.core.domain.utxo import Script, SwapFee
from src.core.errors import MalformedWire
from src.core.math.swap_math import MAX_FEE_BPS


# =============================================================================
# MAINNET CONSTANTS
# =============================================================================

MAINNET_POOL_SCRIPT_HASH: Final[str] = "9ee45349eb188aaf652d9ddd3be184efb600e859d0d961ea756df357"
MAINNET_ORDER_SCRIPT_HASH: Final[str] = "3cf991c2d5b47006c2106c105332456af4d88321301f292f434ad01b"

MAINNET_LIQUIDITY_ADDRESS: Final[str] = (
    "addr1qy3v66uc8shcm3c4kqkjhjqe76dh3y0cvq3awa6lnjvj52nrlasf2cg9vah02a70g2n93p202prq9hgzxph7zuunjgrqjev82a"
)
MAINNET_ORDER_ADDRESS: Final[str] = (
    "addr1q80ukhmvgtm498e3h6pwpe52whpdh98yy4qfwup5zqg7lqz75jq4yvpskgayj55xegdp30g5rfynax66r8vgn9fldndskl33sd"
)

# CancelAction: Constr(1, [0])
CANCEL_REDEEMER: Final[str] = "d87a8100"

# Минимальный ADA для UTxO ордера (возвращается при исполнении/отмене)
DEFAULT_DEPOSIT_LOVELACE: Final[int] = 2_000_000

# Taker fee 0.3%, maker fee 0%
DEFAULT_TAKER_FEE_BPS: Final[int] = 30


# =============================================================================
# CONFIG MODEL
# =============================================================================


class SaturnSwapConfig(BaseModel):
    """
    Конфигурация SaturnSwap.

    Immutable модель (frozen=True). Пустое расписание комиссий допустимо при
    создании и приводит к ConfigurationError при сборке ордера.
    """

    pool_address: str = Field(..., min_length=1, description="Адрес контракта ликвидности")
    order_address: str = Field(..., min_length=1, description="Адрес ордер-контракта")
    pool_script_hash: str = Field(..., pattern=r"^[0-9a-f]{56}$")
    order_script_hash: str = Field(..., pattern=r"^[0-9a-f]{56}$")
    order_script: Script = Field(..., description="Валидатор ордеров")
    cancel_redeemer: str = Field(CANCEL_REDEEMER, description="Redeemer отмены (CBOR hex)")
    swap_fees: Tuple[SwapFee, ...] = Field((), description="Депозит и комиссии ордера")
    taker_fee_bps: StrictInt = Field(DEFAULT_TAKER_FEE_BPS, ge=0, lt=MAX_FEE_BPS)

    model_config = {"frozen": True}

    @field_validator("cancel_redeemer")
    @classmethod
    def validate_cancel_redeemer(cls, v: str) -> str:
        """Redeemer должен декодироваться как Plutus Data."""
        try:
            from_hex(v)
        except MalformedWire as e:
            raise ValueError(f"cancel_redeemer is not valid Plutus data: {e}")
        return v.lower()

    @classmethod
    def mainnet(cls) -> "SaturnSwapConfig":
        """Конфигурация mainnet."""
        return cls(
            pool_address=MAINNET_LIQUIDITY_ADDRESS,
            order_address=MAINNET_ORDER_ADDRESS,
            pool_script_hash=MAINNET_POOL_SCRIPT_HASH,
            order_script_hash=MAINNET_ORDER_SCRIPT_HASH,
            order_script=Script(type="PlutusV2", script=MAINNET_ORDER_SCRIPT_HASH),
            swap_fees=(
                SwapFee(
                    id="deposit",
                    title="Deposit",
                    description=(
                        "Minimum ADA required for the order UTxO. "
                        "Returned when order is executed or cancelled."
                    ),
                    value=DEFAULT_DEPOSIT_LOVELACE,
                    is_returned=True,
                ),
            ),
        )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "SaturnSwapConfig":
        """
        Загрузка конфигурации из JSON файла.

        Raises:
            FileNotFoundError: Файл не найден
            pydantic.ValidationError: Конфигурация некорректна
        """
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate(json.load(f))

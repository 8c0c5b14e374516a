"""
Order — Модель лимитного ордера (SwapDatum)

Immutable Pydantic модель ордера и его жизненный цикл:

    PLACED → {FILLED, CANCELLED, EXPIRED}

Ядро строит payload только для PLACED и PLACED → CANCELLED; исполнение,
матчинг и контроль срока действия выполняются на цепи.

Output reference привязывает ордер к конкретному тратимому входу
(защита от double satisfaction).
"""

from enum import Enum
from typing import Dict, FrozenSet, Optional

from pydantic import BaseModel, Field, StrictInt

from src.core.datum.parameters import DatumParameterKey, ParameterTable
from src.core.domain.asset import Token, token_from_parts, token_parts


# =============================================================================
# ENUMS
# =============================================================================


class OrderState(str, Enum):
    """Состояние ордера."""

    PLACED = "PLACED"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"

    def can_transition(self, target: "OrderState") -> bool:
        return target in _TRANSITIONS[self]

    def transition(self, target: "OrderState") -> "OrderState":
        """
        Переход в новое состояние.

        Raises:
            ValueError: Переход запрещён (терминальное состояние)
        """
        if not self.can_transition(target):
            raise ValueError(f"Order transition {self.value} -> {target.value} is not allowed")
        return target

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]


_TRANSITIONS: Dict[OrderState, FrozenSet[OrderState]] = {
    OrderState.PLACED: frozenset({OrderState.FILLED, OrderState.CANCELLED, OrderState.EXPIRED}),
    OrderState.FILLED: frozenset(),
    OrderState.CANCELLED: frozenset(),
    OrderState.EXPIRED: frozenset(),
}


# =============================================================================
# MODELS
# =============================================================================


class OutputReference(BaseModel):
    """Ссылка на выход транзакции: txHash#index."""

    tx_hash: str = Field(..., pattern=r"^[0-9a-f]{64}$", description="Transaction id (hex)")
    output_index: StrictInt = Field(..., ge=0, description="Индекс выхода")

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.tx_hash}#{self.output_index}"


class Order(BaseModel):
    """
    Лимитный ордер.

    Immutable модель (frozen=True).
    """

    # Владелец
    owner_pub_key_hash: str = Field(..., pattern=r"^[0-9a-f]{56}$")
    owner_staking_key_hash: Optional[str] = Field(None, pattern=r"^[0-9a-f]{56}$")

    # Продажа / покупка
    sell_token: Token
    sell_amount: StrictInt = Field(..., gt=0)
    buy_token: Token
    min_buy_amount: StrictInt = Field(..., gt=0)

    # Срок действия (POSIX ms), None: бессрочный
    expiry_ms: Optional[StrictInt] = Field(None, ge=0)

    output_reference: OutputReference

    model_config = {"frozen": True}

    def to_parameters(self) -> ParameterTable:
        """ParameterTable для схемы ордера."""
        sell_policy, sell_name = token_parts(self.sell_token)
        buy_policy, buy_name = token_parts(self.buy_token)

        params: ParameterTable = {
            DatumParameterKey.SENDER_PUB_KEY_HASH: bytes.fromhex(self.owner_pub_key_hash),
            DatumParameterKey.SWAP_IN_TOKEN_POLICY_ID: sell_policy,
            DatumParameterKey.SWAP_IN_TOKEN_ASSET_NAME: sell_name,
            DatumParameterKey.SWAP_IN_AMOUNT: self.sell_amount,
            DatumParameterKey.SWAP_OUT_TOKEN_POLICY_ID: buy_policy,
            DatumParameterKey.SWAP_OUT_TOKEN_ASSET_NAME: buy_name,
            DatumParameterKey.MIN_RECEIVE: self.min_buy_amount,
            DatumParameterKey.OUTPUT_REFERENCE_TX_HASH: bytes.fromhex(self.output_reference.tx_hash),
            DatumParameterKey.OUTPUT_REFERENCE_INDEX: self.output_reference.output_index,
        }
        if self.owner_staking_key_hash is not None:
            params[DatumParameterKey.SENDER_STAKING_KEY_HASH] = bytes.fromhex(self.owner_staking_key_hash)
        if self.expiry_ms is not None:
            params[DatumParameterKey.EXPIRATION] = self.expiry_ms
        return params

    @classmethod
    def from_parameters(cls, params: ParameterTable) -> "Order":
        """
        Order из ParameterTable схемы ордера.

        Raises:
            KeyError: Нет обязательного ключа
            pydantic.ValidationError: Значения не проходят валидацию модели
        """
        staking = params.get(DatumParameterKey.SENDER_STAKING_KEY_HASH)
        return cls(
            owner_pub_key_hash=params[DatumParameterKey.SENDER_PUB_KEY_HASH].hex(),
            owner_staking_key_hash=staking.hex() if staking is not None else None,
            sell_token=token_from_parts(
                params[DatumParameterKey.SWAP_IN_TOKEN_POLICY_ID],
                params[DatumParameterKey.SWAP_IN_TOKEN_ASSET_NAME],
            ),
            sell_amount=params[DatumParameterKey.SWAP_IN_AMOUNT],
            buy_token=token_from_parts(
                params[DatumParameterKey.SWAP_OUT_TOKEN_POLICY_ID],
                params[DatumParameterKey.SWAP_OUT_TOKEN_ASSET_NAME],
            ),
            min_buy_amount=params[DatumParameterKey.MIN_RECEIVE],
            expiry_ms=params.get(DatumParameterKey.EXPIRATION),
            output_reference=OutputReference(
                tx_hash=params[DatumParameterKey.OUTPUT_REFERENCE_TX_HASH].hex(),
                output_index=params[DatumParameterKey.OUTPUT_REFERENCE_INDEX],
            ),
        )

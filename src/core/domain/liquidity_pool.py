"""
LiquidityPool — Модель пула constant-product

Immutable Pydantic модель: два резерва (int произвольной точности), комиссия
в basis points и идентификация пула.
"""

from typing import Any, Dict, Tuple

from pydantic import BaseModel, Field, StrictInt

from src.core.domain.asset import Token, same_token
from src.core.math.swap_math import MAX_FEE_BPS


class LiquidityPool(BaseModel):
    """
    Пул ликвидности.

    Инварианты: reserve_a >= 0, reserve_b >= 0, 0 <= fee_bps < 10000.
    """

    dex: str = Field(..., min_length=1, description="Идентификатор DEX")
    asset_a: Token = Field(..., description="Первый токен пары")
    asset_b: Token = Field(..., description="Второй токен пары")
    reserve_a: StrictInt = Field(..., ge=0, description="Резерв asset_a")
    reserve_b: StrictInt = Field(..., ge=0, description="Резерв asset_b")
    fee_bps: StrictInt = Field(..., ge=0, lt=MAX_FEE_BPS, description="Комиссия (bps)")
    identifier: str = Field("", description="Идентификатор пула (NFT или txHash#index)")
    address: str = Field("", description="Адрес пула")
    extra: Dict[str, Any] = Field(default_factory=dict, description="Данные DEX")

    model_config = {"frozen": True}

    def has_token(self, token: Token) -> bool:
        return same_token(token, self.asset_a) or same_token(token, self.asset_b)

    def reserves_for(self, swap_in_token: Token) -> Tuple[int, int]:
        """
        (reserve_in, reserve_out) для обмена swap_in_token → другой токен.

        Raises:
            ValueError: Токен не входит в пару
        """
        if same_token(swap_in_token, self.asset_a):
            return self.reserve_a, self.reserve_b
        if same_token(swap_in_token, self.asset_b):
            return self.reserve_b, self.reserve_a
        raise ValueError(f"Token {swap_in_token!r} is not part of pool {self.identifier!r}")

    def other_token(self, token: Token) -> Token:
        """Второй токен пары относительно token."""
        if same_token(token, self.asset_a):
            return self.asset_b
        if same_token(token, self.asset_b):
            return self.asset_a
        raise ValueError(f"Token {token!r} is not part of pool {self.identifier!r}")

"""BaseDex — общий контракт коннекторов DEX.

Коннектор получает готовые данные цепи (UTxO, датумы) и строит payload для
внешнего сборщика транзакций. Асинхронность существует только на границе
с провайдером данных (DataProvider); расчёты и кодек синхронны.
"""

from abc import ABC, abstractmethod
from typing import ClassVar, List, Optional, Protocol, Sequence

from src.core.datum.parameters import ParameterTable
from src.core.domain.asset import Token
from src.core.domain.liquidity_pool import LiquidityPool
from src.core.domain.utxo import PayToAddress, SpendUTxO, SwapFee, UTxO
from src.core.math import swap_math


class DataProvider(Protocol):
    """Провайдер данных цепи (внешний)."""

    async def utxos(self, address: str) -> Sequence[UTxO]:
        ...

    async def datum_value(self, datum_hash: str) -> str:
        """CBOR hex датума по его hash."""
        ...


class BaseDex(ABC):
    """Базовый коннектор DEX с пулами constant-product."""

    identifier: ClassVar[str]

    # =========================================================================
    # SWAP MATH (pool, token, amount)
    # =========================================================================

    def estimated_receive(self, pool: LiquidityPool, swap_in_token: Token, swap_in_amount: int) -> int:
        """Выход обмена swap_in_token → другой токен пары (округление вниз)."""
        reserve_in, reserve_out = pool.reserves_for(swap_in_token)
        return swap_math.estimated_receive(reserve_in, reserve_out, pool.fee_bps, swap_in_amount)

    def estimated_give(self, pool: LiquidityPool, swap_out_token: Token, swap_out_amount: int) -> int:
        """Вход, необходимый для получения swap_out_amount токена swap_out_token (округление вверх)."""
        reserve_out, reserve_in = pool.reserves_for(swap_out_token)
        return swap_math.estimated_give(reserve_in, reserve_out, pool.fee_bps, swap_out_amount)

    def price_impact_percent(self, pool: LiquidityPool, swap_in_token: Token, swap_in_amount: int) -> float:
        reserve_in, reserve_out = pool.reserves_for(swap_in_token)
        return swap_math.price_impact_percent(reserve_in, reserve_out, pool.fee_bps, swap_in_amount)

    # =========================================================================
    # ORDERS
    # =========================================================================

    @abstractmethod
    def swap_order_fees(self) -> Sequence[SwapFee]:
        ...

    @abstractmethod
    def build_swap_order(
        self,
        liquidity_pool: LiquidityPool,
        swap_parameters: ParameterTable,
        spend_utxos: Sequence[SpendUTxO] = (),
    ) -> List[PayToAddress]:
        ...

    @abstractmethod
    def build_cancel_swap_order(self, tx_outputs: Sequence[UTxO], return_address: str) -> List[PayToAddress]:
        ...

    # =========================================================================
    # POOLS
    # =========================================================================

    @abstractmethod
    def liquidity_pool_from_utxo(self, utxo: UTxO, datum_hex: Optional[str] = None) -> Optional[LiquidityPool]:
        ...

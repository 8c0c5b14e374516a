"""SaturnSwap — коннектор limit-order DEX.

Ордер — UTxO по адресу ордер-контракта с inline SwapDatum:
- owner (payment + optional stake credential)
- продаваемый токен и объём
- покупаемый токен и минимальный объём
- optional срок действия (POSIX ms)
- output reference (защита от double satisfaction)

По адресу контракта ликвидности лежат записи нескольких видов
(LiquidityDatum: AddLiquidityDatum / SignatureDatum / ControlDatum);
различение видов выполняется пробой схем.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from src.connectors.base import BaseDex, DataProvider
from src.connectors.saturnswap.config import SaturnSwapConfig
from src.core.contracts import load_definition_codec
from src.core.datum.parameters import DatumParameterKey, ParameterTable
from src.core.domain.asset import LOVELACE, Token, same_token, token_from_parts, token_parts
from src.core.domain.liquidity_pool import LiquidityPool
from src.core.domain.order import Order, OutputReference
from src.core.domain.utxo import AddressType, AssetBalance, PayToAddress, SpendUTxO, SwapFee, UTxO
from src.core.errors import ConfigurationError, InsufficientLiquidity, OrderNotFound, SchemaMismatch
from src.core.math.swap_math import estimated_receive, fee_bps_from_ratio, minimum_receive


logger = logging.getLogger(__name__)

DEFAULT_SLIPPAGE_BPS = 100  # 1%


class SaturnSwap(BaseDex):
    """
    Коннектор SaturnSwap.

    Args:
        config: Адреса, скрипты, redeemer отмены и комиссии
    """

    identifier = "SaturnSwap"

    def __init__(self, config: SaturnSwapConfig):
        self.config = config
        # Датумы цепи (Plutus/Lucid) пишут поля массивами неопределённой длины
        self._order_codec = load_definition_codec("saturnswap_order", strict_wire=False)
        self._control_codec = load_definition_codec("saturnswap_control", strict_wire=False)
        self._pool_codec = load_definition_codec("constant_product_pool", strict_wire=False)

    @property
    def pool_address(self) -> str:
        return self.config.pool_address

    @property
    def order_address(self) -> str:
        return self.config.order_address

    def swap_order_fees(self) -> Tuple[SwapFee, ...]:
        return self.config.swap_fees

    # =========================================================================
    # ORDER PLACEMENT
    # =========================================================================

    def build_swap_parameters(
        self,
        liquidity_pool: LiquidityPool,
        swap_in_token: Token,
        swap_in_amount: int,
        owner_pub_key_hash: str,
        owner_staking_key_hash: Optional[str] = None,
        slippage_bps: int = DEFAULT_SLIPPAGE_BPS,
        expiry_ms: Optional[int] = None,
        output_reference: Optional[OutputReference] = None,
    ) -> ParameterTable:
        """
        ParameterTable ордера, размер которого рассчитан по пулу.

        MinReceive = estimated_receive с учётом slippage_bps (округление вниз).

        Raises:
            ValueError: Токен не входит в пару пула
            InsufficientLiquidity: Ожидаемый выход после slippage равен нулю
        """
        reserve_in, reserve_out = liquidity_pool.reserves_for(swap_in_token)
        amount_out = estimated_receive(reserve_in, reserve_out, liquidity_pool.fee_bps, swap_in_amount)
        min_receive = minimum_receive(amount_out, slippage_bps)
        if min_receive == 0:
            raise InsufficientLiquidity(
                f"Swap of {swap_in_amount} yields nothing after {slippage_bps} bps slippage"
            )

        sell_policy, sell_name = token_parts(swap_in_token)
        buy_policy, buy_name = token_parts(liquidity_pool.other_token(swap_in_token))

        params: ParameterTable = {
            DatumParameterKey.SENDER_PUB_KEY_HASH: bytes.fromhex(owner_pub_key_hash),
            DatumParameterKey.SWAP_IN_TOKEN_POLICY_ID: sell_policy,
            DatumParameterKey.SWAP_IN_TOKEN_ASSET_NAME: sell_name,
            DatumParameterKey.SWAP_IN_AMOUNT: swap_in_amount,
            DatumParameterKey.SWAP_OUT_TOKEN_POLICY_ID: buy_policy,
            DatumParameterKey.SWAP_OUT_TOKEN_ASSET_NAME: buy_name,
            DatumParameterKey.MIN_RECEIVE: min_receive,
        }
        if owner_staking_key_hash is not None:
            params[DatumParameterKey.SENDER_STAKING_KEY_HASH] = bytes.fromhex(owner_staking_key_hash)
        if expiry_ms is not None:
            params[DatumParameterKey.EXPIRATION] = expiry_ms
        if output_reference is not None:
            params[DatumParameterKey.OUTPUT_REFERENCE_TX_HASH] = bytes.fromhex(output_reference.tx_hash)
            params[DatumParameterKey.OUTPUT_REFERENCE_INDEX] = output_reference.output_index
        return params

    def build_swap_order(
        self,
        liquidity_pool: LiquidityPool,
        swap_parameters: ParameterTable,
        spend_utxos: Sequence[SpendUTxO] = (),
    ) -> List[PayToAddress]:
        """
        Payload размещения ордера: выход на адрес ордер-контракта с inline датумом.

        Если output reference не задан, ордер привязывается к первому
        тратимому UTxO. Value = депозит (lovelace) + продаваемый объём.

        Raises:
            ConfigurationError: Депозит не сконфигурирован
            MissingParameter / InvalidParameter: Параметры не подходят схеме ордера
            ValueError: Токены ордера не входят в пару пула
        """
        deposit = next((fee for fee in self.swap_order_fees() if fee.id == "deposit"), None)
        if deposit is None:
            raise ConfigurationError("Deposit fee not configured.")

        params = dict(swap_parameters)
        if DatumParameterKey.OUTPUT_REFERENCE_TX_HASH not in params and spend_utxos:
            bound = spend_utxos[0].utxo
            params[DatumParameterKey.OUTPUT_REFERENCE_TX_HASH] = bytes.fromhex(bound.tx_hash)
            params[DatumParameterKey.OUTPUT_REFERENCE_INDEX] = bound.output_index

        datum_hex = self._order_codec.push(params)

        sell_token = token_from_parts(
            params[DatumParameterKey.SWAP_IN_TOKEN_POLICY_ID],
            params[DatumParameterKey.SWAP_IN_TOKEN_ASSET_NAME],
        )
        buy_token = token_from_parts(
            params[DatumParameterKey.SWAP_OUT_TOKEN_POLICY_ID],
            params[DatumParameterKey.SWAP_OUT_TOKEN_ASSET_NAME],
        )
        for token in (sell_token, buy_token):
            if not liquidity_pool.has_token(token):
                raise ValueError(f"Token {token!r} is not part of pool {liquidity_pool.identifier!r}")

        swap_in_amount = params[DatumParameterKey.SWAP_IN_AMOUNT]
        if same_token(sell_token, LOVELACE):
            value = (AssetBalance(asset=LOVELACE, quantity=deposit.value + swap_in_amount),)
        else:
            value = (
                AssetBalance(asset=LOVELACE, quantity=deposit.value),
                AssetBalance(asset=sell_token, quantity=swap_in_amount),
            )

        logger.debug(
            "SaturnSwap order payload built",
            extra={
                "event": "saturnswap.order_built",
                "pool": liquidity_pool.identifier,
                "swap_in_amount": swap_in_amount,
                "deposit": deposit.value,
            },
        )

        return [
            PayToAddress(
                address=self.order_address,
                address_type=AddressType.CONTRACT,
                value=value,
                datum_hex=datum_hex,
                is_inline_datum=True,
                spend_utxos=tuple(spend_utxos),
            )
        ]

    # =========================================================================
    # ORDER CANCELLATION
    # =========================================================================

    def build_cancel_swap_order(self, tx_outputs: Sequence[UTxO], return_address: str) -> List[PayToAddress]:
        """
        Payload отмены: потратить UTxO ордера с redeemer отмены и вернуть
        всё его содержимое на return_address.

        Raises:
            OrderNotFound: Среди выходов нет UTxO по адресу ордер-контракта
        """
        relevant_utxo = next((utxo for utxo in tx_outputs if utxo.address == self.order_address), None)

        if relevant_utxo is None:
            logger.warning(
                "SaturnSwap order UTxO not found for cancellation",
                extra={"event": "saturnswap.cancel_order_not_found", "outputs": len(tx_outputs)},
            )
            raise OrderNotFound("Unable to find SaturnSwap order UTxO for cancellation.")

        return [
            PayToAddress(
                address=return_address,
                address_type=AddressType.BASE,
                value=relevant_utxo.asset_balances,
                is_inline_datum=False,
                spend_utxos=(
                    SpendUTxO(
                        utxo=relevant_utxo,
                        redeemer=self.config.cancel_redeemer,
                        validator=self.config.order_script,
                        signer=return_address,
                    ),
                ),
            )
        ]

    # =========================================================================
    # DATUMS
    # =========================================================================

    def decode_order(self, datum_hex: str) -> Order:
        """
        Order из SwapDatum.

        Raises:
            MalformedWire: hex/CBOR повреждён
            SchemaMismatch: Датум не является SwapDatum
        """
        return Order.from_parameters(self._order_codec.pull(datum_hex))

    def is_swap_datum(self, datum_hex: str) -> bool:
        try:
            self._order_codec.pull(datum_hex)
        except SchemaMismatch:
            return False
        return True

    def is_control_datum(self, datum_hex: str) -> bool:
        try:
            self._control_codec.pull(datum_hex)
        except SchemaMismatch:
            return False
        return True

    # =========================================================================
    # POOLS
    # =========================================================================

    def liquidity_pool_from_utxo(self, utxo: UTxO, datum_hex: Optional[str] = None) -> Optional[LiquidityPool]:
        """
        LiquidityPool из ControlDatum по адресу контракта ликвидности.

        Записи других видов (AddLiquidityDatum, SignatureDatum) дают None.
        Резервы нулевые: ликвидность limit-order DEX агрегируется из ордеров.
        """
        datum_hex = datum_hex if datum_hex is not None else utxo.datum
        if datum_hex is None:
            return None

        try:
            control = self._control_codec.pull(datum_hex)
        except SchemaMismatch as e:
            logger.debug(
                "UTxO at liquidity address is not a ControlDatum",
                extra={"event": "saturnswap.not_control_datum", "utxo": f"{utxo.tx_hash}#{utxo.output_index}", "reason": str(e)},
            )
            return None

        token_one = token_from_parts(
            control[DatumParameterKey.TOKEN_ONE_POLICY_ID],
            control[DatumParameterKey.TOKEN_ONE_ASSET_NAME],
        )
        token_two = token_from_parts(
            control[DatumParameterKey.TOKEN_TWO_POLICY_ID],
            control[DatumParameterKey.TOKEN_TWO_ASSET_NAME],
        )

        return LiquidityPool(
            dex=self.identifier,
            asset_a=token_one,
            asset_b=token_two,
            reserve_a=0,
            reserve_b=0,
            fee_bps=self.config.taker_fee_bps,
            identifier=f"{utxo.tx_hash}#{utxo.output_index}",
            address=utxo.address,
            extra={
                "is_active": control[DatumParameterKey.IS_ACTIVE],
                "price_ranges": {
                    "token_one": {
                        "min": control[DatumParameterKey.TOKEN_ONE_MIN_PRICE],
                        "max": control[DatumParameterKey.TOKEN_ONE_MAX_PRICE],
                        "precision": control[DatumParameterKey.TOKEN_ONE_PRECISION],
                    },
                    "token_two": {
                        "min": control[DatumParameterKey.TOKEN_TWO_MIN_PRICE],
                        "max": control[DatumParameterKey.TOKEN_TWO_MAX_PRICE],
                        "precision": control[DatumParameterKey.TOKEN_TWO_PRECISION],
                    },
                },
            },
        )

    def liquidity_pool_from_pool_datum(self, utxo: UTxO, datum_hex: str) -> LiquidityPool:
        """
        LiquidityPool из датума пула constant-product.

        Комиссия пула (дробь) переводится в bps с округлением вверх.

        Raises:
            MalformedWire / SchemaMismatch: Датум не является датумом пула
        """
        params = self._pool_codec.pull(datum_hex)
        return LiquidityPool(
            dex=self.identifier,
            asset_a=token_from_parts(
                params[DatumParameterKey.POOL_ASSET_A_POLICY_ID],
                params[DatumParameterKey.POOL_ASSET_A_ASSET_NAME],
            ),
            asset_b=token_from_parts(
                params[DatumParameterKey.POOL_ASSET_B_POLICY_ID],
                params[DatumParameterKey.POOL_ASSET_B_ASSET_NAME],
            ),
            reserve_a=params[DatumParameterKey.RESERVE_A],
            reserve_b=params[DatumParameterKey.RESERVE_B],
            fee_bps=fee_bps_from_ratio(
                params[DatumParameterKey.LP_FEE_NUMERATOR],
                params[DatumParameterKey.LP_FEE_DENOMINATOR],
            ),
            identifier=params[DatumParameterKey.POOL_IDENTIFIER].hex(),
            address=utxo.address,
            extra={"total_lp_tokens": params[DatumParameterKey.TOTAL_LP_TOKENS]},
        )

    async def liquidity_pools(self, provider: DataProvider) -> List[LiquidityPool]:
        """
        Все ControlDatum пулы по адресу контракта ликвидности.

        I/O выполняет провайдер; коннектор только разбирает полученные датумы.
        """
        pools: List[LiquidityPool] = []
        for utxo in await provider.utxos(self.pool_address):
            datum_hex = utxo.datum
            if datum_hex is None and utxo.datum_hash:
                datum_hex = await provider.datum_value(utxo.datum_hash)
            if datum_hex is None:
                continue
            pool = self.liquidity_pool_from_utxo(utxo, datum_hex)
            if pool is not None:
                pools.append(pool)
        return pools

"""
Tests for domain models (Asset, LiquidityPool, Order, UTxO)

Проверяет:
- Создание и валидацию моделей
- Immutability (frozen=True)
- Направление резервов пула
- Order ↔ ParameterTable
- Жизненный цикл ордера
"""

import pytest
from pydantic import ValidationError

from src.core.datum import DatumParameterKey
from src.core.domain import (
    LOVELACE,
    Asset,
    AssetBalance,
    LiquidityPool,
    Order,
    OrderState,
    OutputReference,
    UTxO,
    same_token,
    token_from_parts,
    token_parts,
)


POLICY_ID = "a" * 56
TX_HASH = "3" * 64


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def min_token() -> Asset:
    return Asset(policy_id=POLICY_ID, asset_name="4d494e", decimals=6)


@pytest.fixture
def pool(min_token: Asset) -> LiquidityPool:
    return LiquidityPool(
        dex="SaturnSwap",
        asset_a=LOVELACE,
        asset_b=min_token,
        reserve_a=1_000_000,
        reserve_b=2_000_000,
        fee_bps=30,
        identifier="pool-1",
    )


@pytest.fixture
def order(min_token: Asset) -> Order:
    return Order(
        owner_pub_key_hash="1" * 56,
        owner_staking_key_hash="2" * 56,
        sell_token=LOVELACE,
        sell_amount=10_000,
        buy_token=min_token,
        min_buy_amount=19_545,
        expiry_ms=1_760_000_000_000,
        output_reference=OutputReference(tx_hash=TX_HASH, output_index=1),
    )


# =============================================================================
# ASSET
# =============================================================================


class TestAsset:
    """Тесты Asset"""

    def test_identifier(self, min_token: Asset) -> None:
        assert min_token.identifier == POLICY_ID + "4d494e"

    def test_invalid_policy_id(self) -> None:
        with pytest.raises(ValidationError):
            Asset(policy_id="xyz")

    def test_invalid_asset_name(self) -> None:
        with pytest.raises(ValidationError):
            Asset(policy_id=POLICY_ID, asset_name="abc")

    def test_immutable(self, min_token: Asset) -> None:
        with pytest.raises(ValidationError):
            min_token.decimals = 0

    def test_token_parts(self, min_token: Asset) -> None:
        assert token_parts(LOVELACE) == (b"", b"")
        assert token_parts(min_token) == (bytes.fromhex(POLICY_ID), b"MIN")

    def test_token_from_parts(self) -> None:
        assert token_from_parts(b"", b"") == LOVELACE
        assert token_from_parts(bytes.fromhex(POLICY_ID), b"MIN") == Asset(
            policy_id=POLICY_ID, asset_name="4d494e"
        )
        with pytest.raises(ValueError):
            token_from_parts(b"", b"MIN")

    def test_same_token_ignores_decimals(self, min_token: Asset) -> None:
        assert same_token(min_token, Asset(policy_id=POLICY_ID, asset_name="4d494e"))
        assert not same_token(min_token, LOVELACE)

    def test_unsupported_token(self) -> None:
        with pytest.raises(ValueError):
            token_parts("ada")


# =============================================================================
# LIQUIDITY POOL
# =============================================================================


class TestLiquidityPool:
    """Тесты LiquidityPool"""

    def test_reserves_for(self, pool: LiquidityPool, min_token: Asset) -> None:
        assert pool.reserves_for(LOVELACE) == (1_000_000, 2_000_000)
        assert pool.reserves_for(min_token) == (2_000_000, 1_000_000)

    def test_other_token(self, pool: LiquidityPool, min_token: Asset) -> None:
        assert pool.other_token(LOVELACE) == min_token
        assert pool.other_token(min_token) == LOVELACE

    def test_foreign_token(self, pool: LiquidityPool) -> None:
        foreign = Asset(policy_id="b" * 56)
        assert not pool.has_token(foreign)
        with pytest.raises(ValueError):
            pool.reserves_for(foreign)

    def test_negative_reserve(self, min_token: Asset) -> None:
        with pytest.raises(ValidationError):
            LiquidityPool(
                dex="x", asset_a=LOVELACE, asset_b=min_token, reserve_a=-1, reserve_b=0, fee_bps=30
            )

    def test_fee_out_of_range(self, min_token: Asset) -> None:
        with pytest.raises(ValidationError):
            LiquidityPool(
                dex="x", asset_a=LOVELACE, asset_b=min_token, reserve_a=1, reserve_b=1, fee_bps=10_000
            )

    def test_float_reserve_rejected(self, min_token: Asset) -> None:
        """Резервы — только int"""
        with pytest.raises(ValidationError):
            LiquidityPool(
                dex="x", asset_a=LOVELACE, asset_b=min_token, reserve_a=1.0, reserve_b=1, fee_bps=30
            )

    def test_big_reserves(self, min_token: Asset) -> None:
        pool = LiquidityPool(
            dex="x", asset_a=LOVELACE, asset_b=min_token, reserve_a=10**40, reserve_b=10**40, fee_bps=0
        )
        assert pool.reserve_a == 10**40

    def test_immutable(self, pool: LiquidityPool) -> None:
        with pytest.raises(ValidationError):
            pool.reserve_a = 0


# =============================================================================
# ORDER
# =============================================================================


class TestOrder:
    """Тесты Order"""

    def test_to_parameters(self, order: Order) -> None:
        params = order.to_parameters()

        assert params[DatumParameterKey.SENDER_PUB_KEY_HASH] == bytes.fromhex("1" * 56)
        assert params[DatumParameterKey.SWAP_IN_TOKEN_POLICY_ID] == b""
        assert params[DatumParameterKey.SWAP_OUT_TOKEN_ASSET_NAME] == b"MIN"
        assert params[DatumParameterKey.EXPIRATION] == 1_760_000_000_000
        assert params[DatumParameterKey.OUTPUT_REFERENCE_INDEX] == 1

    def test_optional_fields_omitted(self, order: Order) -> None:
        bare = order.model_copy(update={"owner_staking_key_hash": None, "expiry_ms": None})
        params = bare.to_parameters()

        assert DatumParameterKey.SENDER_STAKING_KEY_HASH not in params
        assert DatumParameterKey.EXPIRATION not in params

    def test_from_parameters(self, order: Order) -> None:
        restored = Order.from_parameters(order.to_parameters())

        # decimals не хранится в датуме
        assert restored.buy_token == Asset(policy_id=POLICY_ID, asset_name="4d494e")
        assert restored.output_reference == order.output_reference
        assert restored.expiry_ms == order.expiry_ms
        assert restored.to_parameters() == order.to_parameters()

    def test_zero_amount_rejected(self, order: Order) -> None:
        with pytest.raises(ValidationError):
            Order(**{**order.model_dump(), "sell_amount": 0})

    def test_output_reference_str(self) -> None:
        assert str(OutputReference(tx_hash=TX_HASH, output_index=2)) == f"{TX_HASH}#2"


class TestOrderState:
    """Жизненный цикл ордера"""

    @pytest.mark.parametrize("target", [OrderState.FILLED, OrderState.CANCELLED, OrderState.EXPIRED])
    def test_placed_transitions(self, target: OrderState) -> None:
        assert OrderState.PLACED.can_transition(target)
        assert OrderState.PLACED.transition(target) is target

    @pytest.mark.parametrize("state", [OrderState.FILLED, OrderState.CANCELLED, OrderState.EXPIRED])
    def test_terminal_states(self, state: OrderState) -> None:
        assert state.is_terminal
        with pytest.raises(ValueError):
            state.transition(OrderState.PLACED)

    def test_placed_is_not_terminal(self) -> None:
        assert not OrderState.PLACED.is_terminal


# =============================================================================
# UTXO
# =============================================================================


class TestUTxO:
    """Тесты UTxO"""

    def test_balances_are_tuple(self) -> None:
        utxo = UTxO(
            address="addr_test1",
            tx_hash=TX_HASH,
            output_index=0,
            asset_balances=[AssetBalance(asset=LOVELACE, quantity=5)],
        )
        assert isinstance(utxo.asset_balances, tuple)

    def test_invalid_tx_hash(self) -> None:
        with pytest.raises(ValidationError):
            UTxO(address="addr_test1", tx_hash="abc", output_index=0)

    def test_negative_quantity(self) -> None:
        with pytest.raises(ValidationError):
            AssetBalance(asset=LOVELACE, quantity=-1)

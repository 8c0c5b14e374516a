"""
Юнит-тесты для модуля SwapMath

Проверяет:
1. Точные значения формул (целочисленные, пересчёт напрямую)
2. Монотонность estimated_receive по amount_in и fee_bps (hypothesis)
3. Гарантию estimated_give: полученного входа достаточно (hypothesis)
4. Граничные случаи (нулевой вход, нехватка ликвидности)
5. Согласованность price impact с котируемым объёмом (hypothesis)
"""

from fractions import Fraction

import pytest
from hypothesis import assume, given, settings, strategies as st

from src.core.errors import InsufficientLiquidity
from src.core.math.swap_math import (
    BPS_DENOMINATOR,
    estimated_give,
    estimated_receive,
    fee_bps_from_ratio,
    minimum_receive,
    price_impact_percent,
    validate_fee_bps,
)


# =============================================================================
# STRATEGIES
# =============================================================================

reserves = st.integers(min_value=1, max_value=10**30)
fees = st.integers(min_value=0, max_value=BPS_DENOMINATOR - 1)
amounts = st.integers(min_value=0, max_value=10**30)


@st.composite
def give_requests(draw):
    """(reserve_in, reserve_out, fee_bps, wanted) с 0 < wanted < reserve_out"""
    reserve_in = draw(reserves)
    reserve_out = draw(st.integers(min_value=2, max_value=10**30))
    fee = draw(fees)
    wanted = draw(st.integers(min_value=1, max_value=reserve_out - 1))
    return reserve_in, reserve_out, fee, wanted


class TestEstimatedReceive:
    """Тесты estimated_receive"""

    def test_scenario(self) -> None:
        """1M / 2M, 0.3%, вход 10 000 → 19 743"""
        reserve_in, reserve_out, fee, amount_in = 1_000_000, 2_000_000, 30, 10_000
        expected = (amount_in * (BPS_DENOMINATOR - fee) * reserve_out) // (
            amount_in * (BPS_DENOMINATOR - fee) + reserve_in * BPS_DENOMINATOR
        )

        result = estimated_receive(reserve_in, reserve_out, fee, amount_in)

        assert result == expected
        assert result == 19_743

    @given(reserve_in=st.integers(min_value=0, max_value=10**30), reserve_out=st.integers(min_value=0, max_value=10**30), fee=fees)
    @settings(max_examples=100)
    def test_zero_amount(self, reserve_in, reserve_out, fee) -> None:
        """Нулевой вход → нулевой выход при любых резервах"""
        assert estimated_receive(reserve_in, reserve_out, fee, 0) == 0

    @given(reserve_in=reserves, reserve_out=reserves, fee=fees, amount_in=amounts)
    @settings(max_examples=300, deadline=None)
    def test_rounds_down(self, reserve_in, reserve_out, fee, amount_in) -> None:
        """Пул не выплачивает больше, чем допускает x*y=k"""
        out = estimated_receive(reserve_in, reserve_out, fee, amount_in)
        exact = Fraction(
            amount_in * (BPS_DENOMINATOR - fee) * reserve_out,
            amount_in * (BPS_DENOMINATOR - fee) + reserve_in * BPS_DENOMINATOR,
        )

        assert out <= exact < out + 1
        assert out < reserve_out
        # constant-product после обмена не уменьшается
        assert (reserve_in + amount_in) * (reserve_out - out) >= reserve_in * reserve_out

    @given(reserve_in=reserves, reserve_out=reserves, fee=fees, a=amounts, b=amounts)
    @settings(max_examples=300, deadline=None)
    def test_monotonic_in_amount(self, reserve_in, reserve_out, fee, a, b) -> None:
        smaller, larger = sorted((a, b))
        assert estimated_receive(reserve_in, reserve_out, fee, smaller) <= estimated_receive(
            reserve_in, reserve_out, fee, larger
        )

    @given(reserve_in=reserves, reserve_out=reserves, f1=fees, f2=fees, amount_in=amounts)
    @settings(max_examples=300, deadline=None)
    def test_monotonic_in_fee(self, reserve_in, reserve_out, f1, f2, amount_in) -> None:
        lower, higher = sorted((f1, f2))
        assert estimated_receive(reserve_in, reserve_out, lower, amount_in) >= estimated_receive(
            reserve_in, reserve_out, higher, amount_in
        )

    def test_never_drains_pool(self) -> None:
        assert estimated_receive(1_000, 1_000, 0, 10**40) < 1_000

    def test_empty_pool(self) -> None:
        with pytest.raises(InsufficientLiquidity):
            estimated_receive(0, 1_000, 30, 10)
        with pytest.raises(InsufficientLiquidity):
            estimated_receive(1_000, 0, 30, 10)

    def test_float_rejected(self) -> None:
        with pytest.raises(TypeError):
            estimated_receive(1_000_000.0, 2_000_000, 30, 10_000)
        with pytest.raises(TypeError):
            estimated_receive(1_000_000, 2_000_000, 30, True)

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError):
            estimated_receive(-1, 2_000_000, 30, 10)
        with pytest.raises(ValueError):
            estimated_receive(1, 2_000_000, 30, -10)

    def test_fee_range(self) -> None:
        with pytest.raises(ValueError):
            estimated_receive(1_000, 1_000, 10_000, 10)
        with pytest.raises(ValueError):
            estimated_receive(1_000, 1_000, -1, 10)


class TestEstimatedGive:
    """Тесты estimated_give"""

    def test_exact_value(self) -> None:
        """1000/1000 без комиссии, нужно 500 → 1001"""
        assert estimated_give(1_000, 1_000, 0, 500) == 1_001

    @given(request=give_requests())
    @settings(max_examples=300, deadline=None)
    def test_safety_bound(self, request) -> None:
        """estimated_receive(estimated_give(X)) >= X"""
        reserve_in, reserve_out, fee, wanted = request

        amount_in = estimated_give(reserve_in, reserve_out, fee, wanted)

        assert estimated_receive(reserve_in, reserve_out, fee, amount_in) >= wanted

    @given(request=give_requests())
    @settings(max_examples=200, deadline=None)
    def test_rounds_up(self, request) -> None:
        """Результат строго больше точного значения"""
        reserve_in, reserve_out, fee, wanted = request
        exact = Fraction(
            wanted * reserve_in * BPS_DENOMINATOR,
            (reserve_out - wanted) * (BPS_DENOMINATOR - fee),
        )
        assert estimated_give(reserve_in, reserve_out, fee, wanted) > exact

    @given(reserve_in=reserves, reserve_out=st.integers(min_value=0, max_value=10**30), fee=fees, excess=amounts)
    @settings(max_examples=100)
    def test_insufficient_liquidity(self, reserve_in, reserve_out, fee, excess) -> None:
        """wanted >= reserve_out → InsufficientLiquidity"""
        with pytest.raises(InsufficientLiquidity):
            estimated_give(reserve_in, reserve_out, fee, reserve_out + excess)

    def test_insufficient_liquidity_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            estimated_give(1, 1, 0, 1)

    def test_zero_wanted(self) -> None:
        """floor(0) + 1"""
        assert estimated_give(1_000, 1_000, 30, 0) == 1
        assert estimated_give(0, 1_000, 30, 0) == 1

    def test_empty_output_side(self) -> None:
        """Пустой выходной резерв — ошибка даже для нулевого запроса"""
        with pytest.raises(InsufficientLiquidity):
            estimated_give(0, 0, 30, 0)
        with pytest.raises(InsufficientLiquidity):
            estimated_give(1_000, 0, 30, 0)

    def test_empty_input_side(self) -> None:
        with pytest.raises(InsufficientLiquidity):
            estimated_give(0, 1_000, 30, 10)


class TestPriceImpact:
    """Тесты price_impact_percent"""

    def test_scenario(self) -> None:
        """1M / 2M, 0.3%, вход 10 000: (2e10 − 19743e6) / 2e10 = 1.285%"""
        assert price_impact_percent(1_000_000, 2_000_000, 30, 10_000) == pytest.approx(1.285, abs=1e-12)

    @given(reserve_in=reserves, reserve_out=reserves, fee=fees, amount_in=amounts)
    @settings(max_examples=200, deadline=None)
    def test_consistent_with_quote(self, reserve_in, reserve_out, fee, amount_in) -> None:
        """Impact пересчитывается из котируемого объёма и лежит в [0, 100]"""
        assume(amount_in > 0)
        out = estimated_receive(reserve_in, reserve_out, fee, amount_in)
        expected = float(Fraction(100 * (amount_in * reserve_out - out * reserve_in), amount_in * reserve_out))

        impact = price_impact_percent(reserve_in, reserve_out, fee, amount_in)

        assert impact == expected
        assert 0.0 <= impact <= 100.0

    def test_zero_amount(self) -> None:
        assert price_impact_percent(1_000, 1_000, 30, 0) == 0.0

    def test_grows_with_amount(self) -> None:
        impacts = [price_impact_percent(10**9, 10**9, 30, amount) for amount in (10**6, 10**7, 10**8)]
        assert impacts == sorted(impacts)


class TestHelpers:
    """Тесты вспомогательных функций"""

    def test_minimum_receive(self) -> None:
        assert minimum_receive(19_743, 100) == 19_545
        assert minimum_receive(19_743, 0) == 19_743
        assert minimum_receive(19_743, 10_000) == 0

    def test_minimum_receive_range(self) -> None:
        with pytest.raises(ValueError):
            minimum_receive(100, 10_001)
        with pytest.raises(ValueError):
            minimum_receive(-1, 100)

    def test_fee_bps_from_ratio(self) -> None:
        assert fee_bps_from_ratio(3, 1_000) == 30
        assert fee_bps_from_ratio(0, 1) == 0
        assert fee_bps_from_ratio(997, 1_000_000) == 10

    def test_fee_bps_rounds_up(self) -> None:
        """Комиссия протокола не занижается"""
        assert fee_bps_from_ratio(1, 3) == 3_334

    def test_fee_bps_invalid(self) -> None:
        with pytest.raises(ValueError):
            fee_bps_from_ratio(1, 1)
        with pytest.raises(ValueError):
            fee_bps_from_ratio(1, 0)
        with pytest.raises(ValueError):
            fee_bps_from_ratio(-1, 100)

    def test_validate_fee_bps(self) -> None:
        validate_fee_bps(0)
        validate_fee_bps(9_999)
        with pytest.raises(TypeError):
            validate_fee_bps(0.3)

"""
SwapMath — Constant-Product Swap Pricing

Модуль вычисляет объёмы обмена в пуле constant-product (x * y = k) с
комиссией в basis points (10000 bps = 100%).

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Вся арифметика резервов и объёмов — целочисленная (int произвольной точности)
2. estimated_receive округляет ВНИЗ: пул никогда не выплачивает больше,
   чем допускает инвариант constant-product
3. estimated_give округляет ВВЕРХ (+1): рассчитанного входа всегда
   достаточно для получения запрошенного выхода
4. float допускается только для итогового процента (price impact)

ФОРМУЛЫ:
    amount_out = floor( a·(10000−f)·R_out / (a·(10000−f) + R_in·10000) )
    amount_in  = floor( X·R_in·10000 / ((R_out−X)·(10000−f)) ) + 1
    impact_%   = 100 · (a·R_out − amount_out·R_in) / (a·R_out)
"""

from fractions import Fraction
from typing import Final

from src.core.errors import InsufficientLiquidity


# =============================================================================
# КОНСТАНТЫ
# =============================================================================

# Знаменатель basis points: 10000 bps = 100%
BPS_DENOMINATOR: Final[int] = 10_000

# Максимальная комиссия (исключительно): при 100% обмен невозможен
MAX_FEE_BPS: Final[int] = BPS_DENOMINATOR


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def _require_int(value: object, name: str) -> None:
    # bool является подклассом int; float запрещён для арифметики резервов
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be int, got {type(value).__name__}")


def validate_fee_bps(fee_bps: int) -> None:
    """
    Проверка комиссии: 0 <= fee_bps < 10000.

    Raises:
        TypeError: fee_bps не int
        ValueError: fee_bps вне диапазона
    """
    _require_int(fee_bps, "fee_bps")
    if not 0 <= fee_bps < MAX_FEE_BPS:
        raise ValueError(f"fee_bps must be in [0, {MAX_FEE_BPS}), got {fee_bps}")


def _validate_swap_inputs(reserve_in: int, reserve_out: int, fee_bps: int, amount: int, amount_name: str) -> None:
    _require_int(reserve_in, "reserve_in")
    _require_int(reserve_out, "reserve_out")
    _require_int(amount, amount_name)
    validate_fee_bps(fee_bps)

    if reserve_in < 0 or reserve_out < 0:
        raise ValueError(f"Reserves must be non-negative, got ({reserve_in}, {reserve_out})")
    if amount < 0:
        raise ValueError(f"{amount_name} must be non-negative, got {amount}")


# =============================================================================
# ФОРМУЛЫ
# =============================================================================


def estimated_receive(reserve_in: int, reserve_out: int, fee_bps: int, amount_in: int) -> int:
    """
    Выход обмена для заданного входа (округление вниз).

    Args:
        reserve_in: Резерв входного токена
        reserve_out: Резерв выходного токена
        fee_bps: Комиссия пула в basis points
        amount_in: Объём входа

    Returns:
        Объём выхода

    Raises:
        InsufficientLiquidity: Пустой резерв при ненулевом входе
    """
    _validate_swap_inputs(reserve_in, reserve_out, fee_bps, amount_in, "amount_in")

    if amount_in == 0:
        return 0
    if reserve_in == 0 or reserve_out == 0:
        raise InsufficientLiquidity(
            f"Pool has an empty side (reserve_in={reserve_in}, reserve_out={reserve_out})"
        )

    amount_in_with_fee = amount_in * (BPS_DENOMINATOR - fee_bps)
    numerator = amount_in_with_fee * reserve_out
    denominator = amount_in_with_fee + reserve_in * BPS_DENOMINATOR
    return numerator // denominator


def estimated_give(reserve_in: int, reserve_out: int, fee_bps: int, amount_out: int) -> int:
    """
    Вход, необходимый для получения не менее amount_out (округление вверх).

    Args:
        reserve_in: Резерв входного токена
        reserve_out: Резерв выходного токена
        fee_bps: Комиссия пула в basis points
        amount_out: Желаемый объём выхода

    Returns:
        Объём входа

    Raises:
        InsufficientLiquidity: amount_out >= reserve_out или пустой резерв
    """
    _validate_swap_inputs(reserve_in, reserve_out, fee_bps, amount_out, "amount_out")

    if amount_out >= reserve_out:
        raise InsufficientLiquidity(
            f"Requested {amount_out} but pool holds only {reserve_out} of the output token"
        )
    if reserve_in == 0 and amount_out > 0:
        raise InsufficientLiquidity("Pool has an empty input side (reserve_in=0)")

    numerator = amount_out * reserve_in * BPS_DENOMINATOR
    denominator = (reserve_out - amount_out) * (BPS_DENOMINATOR - fee_bps)
    return numerator // denominator + 1


def price_impact_percent(reserve_in: int, reserve_out: int, fee_bps: int, amount_in: int) -> float:
    """
    Отклонение эффективной цены обмена от спот-цены пула, в процентах.

    Вычисляется из тех же целочисленных величин, что и estimated_receive
    (результат согласован с котируемым объёмом). Комиссия входит в impact.

    spot      = R_out / R_in
    effective = amount_out / a
    impact_%  = 100 · (1 − effective / spot) = 100 · (a·R_out − amount_out·R_in) / (a·R_out)

    Returns:
        Процент в [0, 100] (float только на финальном шаге)
    """
    amount_out = estimated_receive(reserve_in, reserve_out, fee_bps, amount_in)
    if amount_in == 0:
        return 0.0

    spot_value = amount_in * reserve_out
    impact = Fraction(100 * (spot_value - amount_out * reserve_in), spot_value)
    return float(impact)


# =============================================================================
# ВСПОМОГАТЕЛЬНЫЕ
# =============================================================================


def minimum_receive(amount_out: int, slippage_bps: int) -> int:
    """
    Минимальный приемлемый выход с учётом допустимого проскальзывания.

    floor(amount_out · (10000 − slippage_bps) / 10000)

    Raises:
        ValueError: slippage_bps вне [0, 10000] или отрицательный amount_out
    """
    _require_int(amount_out, "amount_out")
    _require_int(slippage_bps, "slippage_bps")
    if amount_out < 0:
        raise ValueError(f"amount_out must be non-negative, got {amount_out}")
    if not 0 <= slippage_bps <= BPS_DENOMINATOR:
        raise ValueError(f"slippage_bps must be in [0, {BPS_DENOMINATOR}], got {slippage_bps}")
    return amount_out * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR


def fee_bps_from_ratio(numerator: int, denominator: int) -> int:
    """
    Конверсия дроби комиссии (как в датуме пула) в basis points.

    Округление ВВЕРХ: комиссия протокола никогда не занижается.

    Raises:
        ValueError: denominator <= 0, numerator < 0 или комиссия >= 100%
    """
    _require_int(numerator, "numerator")
    _require_int(denominator, "denominator")
    if denominator <= 0:
        raise ValueError(f"Fee denominator must be positive, got {denominator}")
    if numerator < 0:
        raise ValueError(f"Fee numerator must be non-negative, got {numerator}")

    fee_bps = -(-numerator * BPS_DENOMINATOR // denominator)
    validate_fee_bps(fee_bps)
    return fee_bps

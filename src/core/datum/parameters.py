"""
ParameterTable — именованные параметры датума

ParameterTable — обычный dict: ключ параметра → bytes | int (bool для
BoolField). Отсутствие ключа опционального поля означает вариант "none".

DatumParameterKey — каталог всех известных ключей. Каждое поле каждой схемы
получает собственный ключ: один ключ никогда не обозначает два разных по
смыслу поля (например, output reference ордера не переиспользует ключи
идентификатора пула или комиссии батчера).
"""

from typing import Dict, Final, FrozenSet, Union


ParameterValue = Union[bytes, int]
ParameterTable = Dict[str, ParameterValue]


class DatumParameterKey:
    """Ключи параметров датумов."""

    # Владелец ордера (Address)
    SENDER_PUB_KEY_HASH: Final[str] = "SenderPubKeyHash"
    SENDER_STAKING_KEY_HASH: Final[str] = "SenderStakingKeyHash"

    # Продаваемый токен
    SWAP_IN_TOKEN_POLICY_ID: Final[str] = "SwapInTokenPolicyId"
    SWAP_IN_TOKEN_ASSET_NAME: Final[str] = "SwapInTokenAssetName"
    SWAP_IN_AMOUNT: Final[str] = "SwapInAmount"

    # Покупаемый токен
    SWAP_OUT_TOKEN_POLICY_ID: Final[str] = "SwapOutTokenPolicyId"
    SWAP_OUT_TOKEN_ASSET_NAME: Final[str] = "SwapOutTokenAssetName"
    MIN_RECEIVE: Final[str] = "MinReceive"

    # Срок действия ордера (POSIX ms)
    EXPIRATION: Final[str] = "Expiration"

    # Output reference для защиты от double satisfaction
    OUTPUT_REFERENCE_TX_HASH: Final[str] = "OutputReferenceTxHash"
    OUTPUT_REFERENCE_INDEX: Final[str] = "OutputReferenceIndex"

    # Пул constant-product
    POOL_IDENTIFIER: Final[str] = "PoolIdentifier"
    POOL_ASSET_A_POLICY_ID: Final[str] = "PoolAssetAPolicyId"
    POOL_ASSET_A_ASSET_NAME: Final[str] = "PoolAssetAAssetName"
    POOL_ASSET_B_POLICY_ID: Final[str] = "PoolAssetBPolicyId"
    POOL_ASSET_B_ASSET_NAME: Final[str] = "PoolAssetBAssetName"
    RESERVE_A: Final[str] = "ReserveA"
    RESERVE_B: Final[str] = "ReserveB"
    TOTAL_LP_TOKENS: Final[str] = "TotalLpTokens"
    LP_FEE_NUMERATOR: Final[str] = "LpFeeNumerator"
    LP_FEE_DENOMINATOR: Final[str] = "LpFeeDenominator"

    # ControlDatum (управление ликвидностью)
    TOKEN_ONE_POLICY_ID: Final[str] = "TokenOnePolicyId"
    TOKEN_ONE_ASSET_NAME: Final[str] = "TokenOneAssetName"
    TOKEN_ONE_MIN_PRICE: Final[str] = "TokenOneMinPrice"
    TOKEN_ONE_MAX_PRICE: Final[str] = "TokenOneMaxPrice"
    TOKEN_ONE_PRECISION: Final[str] = "TokenOnePrecision"
    TOKEN_TWO_POLICY_ID: Final[str] = "TokenTwoPolicyId"
    TOKEN_TWO_ASSET_NAME: Final[str] = "TokenTwoAssetName"
    TOKEN_TWO_MIN_PRICE: Final[str] = "TokenTwoMinPrice"
    TOKEN_TWO_MAX_PRICE: Final[str] = "TokenTwoMaxPrice"
    TOKEN_TWO_PRECISION: Final[str] = "TokenTwoPrecision"
    IS_ACTIVE: Final[str] = "IsActive"

    @classmethod
    def all_keys(cls) -> FrozenSet[str]:
        """Множество всех объявленных ключей."""
        return frozenset(
            value
            for name, value in vars(cls).items()
            if name.isupper() and isinstance(value, str)
        )

"""
Asset — Модель нативного токена Cardano

Токен идентифицируется парой (policy_id, asset_name). ADA представлена
строкой "lovelace" (пустые policy_id и asset_name в датумах).
"""

from typing import Final, Literal, Tuple, Union

from pydantic import BaseModel, Field


# =============================================================================
# CONSTANTS
# =============================================================================

LOVELACE: Final[str] = "lovelace"

# Длина policy id (hex): 28 байт
POLICY_ID_HEX_LENGTH: Final[int] = 56

# Максимальная длина имени актива (hex): 32 байта
ASSET_NAME_MAX_HEX_LENGTH: Final[int] = 64


# =============================================================================
# ASSET MODEL
# =============================================================================


class Asset(BaseModel):
    """
    Нативный токен (не ADA).

    Immutable модель (frozen=True).
    """

    policy_id: str = Field(..., pattern=r"^[0-9a-f]{56}$", description="Policy ID (hex)")
    asset_name: str = Field(
        "", pattern=r"^([0-9a-f]{2})*$", max_length=ASSET_NAME_MAX_HEX_LENGTH,
        description="Asset name (hex)",
    )
    decimals: int = Field(0, ge=0, description="Количество знаков после запятой")

    model_config = {"frozen": True}

    @property
    def identifier(self) -> str:
        """policy_id + asset_name (hex)"""
        return self.policy_id + self.asset_name


Token = Union[Asset, Literal["lovelace"]]


# =============================================================================
# HELPERS
# =============================================================================


def token_parts(token: Token) -> Tuple[bytes, bytes]:
    """(policy_id, asset_name) токена в байтах; для ADA — (b"", b"")"""
    if isinstance(token, Asset):
        return bytes.fromhex(token.policy_id), bytes.fromhex(token.asset_name)
    if token == LOVELACE:
        return b"", b""
    raise ValueError(f"Unsupported token: {token!r}")


def token_from_parts(policy_id: bytes, asset_name: bytes) -> Token:
    """Обратная операция к token_parts."""
    if not policy_id:
        if asset_name:
            raise ValueError("ADA must have an empty asset name")
        return LOVELACE
    return Asset(policy_id=policy_id.hex(), asset_name=asset_name.hex())


def same_token(a: Token, b: Token) -> bool:
    """Сравнение токенов по идентичности (без учёта decimals)."""
    return token_parts(a) == token_parts(b)

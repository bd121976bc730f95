"""Raffle configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from dotenv import load_dotenv

from .draw.requester import RandomnessRequestParams

DEFAULT_CALLBACK_GAS_LIMIT = 500_000
DEFAULT_REQUEST_CONFIRMATIONS = 3
NUM_WORDS = 1


def _required(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Environment variable '{name}' is not set")
    return value


def _int_at_least(name: str, raw: str, minimum: int) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return value


def _positive_int(name: str, raw: str) -> int:
    return _int_at_least(name, raw, 1)


@dataclass(frozen=True)
class RaffleConfig:
    """Immutable settings of a raffle instance.

    Attributes
    ----------
    entry_fee : int
        Minimum payment to enter, in the smallest currency unit.
    draw_interval : timedelta
        Minimum time between two draws.
    key_hash : str
        Randomness source selector (gas lane) passed to the oracle.
    subscription_id : str
        Oracle subscription credited for requests.
    oracle_identity : str
        The only caller allowed to deliver randomness.
    callback_gas_limit : int, default: 500000
        Resource limit of the fulfillment callback.
    request_confirmations : int, default: 3
        Confirmations the oracle waits for before answering.
    """

    entry_fee: int
    draw_interval: timedelta
    key_hash: str
    subscription_id: str
    oracle_identity: str
    callback_gas_limit: int = DEFAULT_CALLBACK_GAS_LIMIT
    request_confirmations: int = DEFAULT_REQUEST_CONFIRMATIONS
    num_words: int = NUM_WORDS

    def __post_init__(self) -> None:
        if self.entry_fee <= 0:
            raise ValueError("entry_fee must be positive")
        if self.draw_interval < timedelta(0):
            raise ValueError("draw_interval must not be negative")
        if not self.oracle_identity:
            raise ValueError("oracle_identity must not be empty")
        if self.num_words != NUM_WORDS:
            raise ValueError(f"num_words must be {NUM_WORDS}")

    @classmethod
    def from_env(cls) -> "RaffleConfig":
        """Build the configuration from environment variables and ``.env``.

        Required: ``RAFFLE_ENTRY_FEE``, ``RAFFLE_DRAW_INTERVAL_SECONDS``,
        ``ORACLE_KEY_HASH``, ``ORACLE_SUBSCRIPTION_ID`` and ``ORACLE_IDENTITY``.
        Optional: ``ORACLE_CALLBACK_GAS_LIMIT`` and
        ``ORACLE_REQUEST_CONFIRMATIONS``.

        Raises
        ------
        RuntimeError
            If a required variable is missing.
        ValueError
            If a numeric variable is malformed or out of range. The draw
            interval may be zero; every other number must be positive.
        """
        load_dotenv()
        return cls(
            entry_fee=_positive_int("RAFFLE_ENTRY_FEE", _required("RAFFLE_ENTRY_FEE")),
            draw_interval=timedelta(
                seconds=_int_at_least(
                    "RAFFLE_DRAW_INTERVAL_SECONDS",
                    _required("RAFFLE_DRAW_INTERVAL_SECONDS"),
                    0,
                )
            ),
            key_hash=_required("ORACLE_KEY_HASH"),
            subscription_id=_required("ORACLE_SUBSCRIPTION_ID"),
            oracle_identity=_required("ORACLE_IDENTITY"),
            callback_gas_limit=_positive_int(
                "ORACLE_CALLBACK_GAS_LIMIT",
                os.getenv("ORACLE_CALLBACK_GAS_LIMIT", str(DEFAULT_CALLBACK_GAS_LIMIT)),
            ),
            request_confirmations=_positive_int(
                "ORACLE_REQUEST_CONFIRMATIONS",
                os.getenv(
                    "ORACLE_REQUEST_CONFIRMATIONS", str(DEFAULT_REQUEST_CONFIRMATIONS)
                ),
            ),
        )

    def randomness_params(self) -> RandomnessRequestParams:
        return RandomnessRequestParams(
            key_hash=self.key_hash,
            subscription_id=self.subscription_id,
            request_confirmations=self.request_confirmations,
            callback_gas_limit=self.callback_gas_limit,
            num_words=self.num_words,
        )


__all__ = ["RaffleConfig"]

"""Default EIP-1559 fee estimation."""

from __future__ import annotations

from typing import Callable, List, Sequence, Tuple

EIP1559_FEE_ESTIMATION_PAST_BLOCKS = 10
"""Number of past blocks whose fee rewards are fetched for estimation."""

EIP1559_FEE_ESTIMATION_REWARD_PERCENTILE = 5.0
"""Default percentile of gas premiums fetched for estimation."""

EIP1559_FEE_ESTIMATION_DEFAULT_PRIORITY_FEE = 3_000_000_000
"""Priority fee used while the base fee stays under the trigger."""

EIP1559_FEE_ESTIMATION_PRIORITY_FEE_TRIGGER = 100_000_000_000
"""Base fee from which the priority fee is estimated from history."""

EIP1559_FEE_ESTIMATION_THRESHOLD_MAX_CHANGE = 200
"""Percentage jump in fees above which lower history values are ignored."""

EstimatorFunction = Callable[[int, List[List[int]]], Tuple[int, int]]

_I256_MAX = (1 << 255) - 1


def _estimate_priority_fee(rewards: Sequence[Sequence[int]]) -> int:
    fees = sorted(reward[0] for reward in rewards if reward[0] > 0)
    if not fees:
        return 0
    if len(fees) == 1:
        return fees[0]
    if fees[-1] > _I256_MAX:
        raise OverflowError("priority fee overflow")

    changes = [(later - earlier) * 100 // earlier for earlier, later in zip(fees, fees[1:])]
    max_change = max(changes)
    max_change_index = changes.index(max_change)

    # After a large jump in fees, consider only the values from the jump onwards.
    if (
        max_change >= EIP1559_FEE_ESTIMATION_THRESHOLD_MAX_CHANGE
        and max_change_index >= len(fees) // 2
    ):
        values = fees[max_change_index:]
    else:
        values = fees
    return values[len(values) // 2]


def _base_fee_surged(base_fee_per_gas: int) -> int:
    if base_fee_per_gas <= 40_000_000_000:
        return base_fee_per_gas * 2
    if base_fee_per_gas <= 100_000_000_000:
        return base_fee_per_gas * 16 // 10
    if base_fee_per_gas <= 200_000_000_000:
        return base_fee_per_gas * 14 // 10
    return base_fee_per_gas * 12 // 10


def eip1559_default_estimator(
    base_fee_per_gas: int, rewards: Sequence[Sequence[int]]
) -> Tuple[int, int]:
    """Estimate ``(max_fee_per_gas, max_priority_fee_per_gas)``.

    ``rewards`` is the per-block reward history of a fee-history query; the
    first entry of each block is used.
    """
    if base_fee_per_gas < 0:
        raise ValueError("base fee per gas must not be negative")
    if base_fee_per_gas < EIP1559_FEE_ESTIMATION_PRIORITY_FEE_TRIGGER:
        max_priority_fee = EIP1559_FEE_ESTIMATION_DEFAULT_PRIORITY_FEE
    else:
        max_priority_fee = max(
            _estimate_priority_fee(rewards), EIP1559_FEE_ESTIMATION_DEFAULT_PRIORITY_FEE
        )
    potential_max_fee = _base_fee_surged(base_fee_per_gas)
    if max_priority_fee > potential_max_fee:
        max_fee = max_priority_fee + potential_max_fee
    else:
        max_fee = potential_max_fee
    return max_fee, max_priority_fee
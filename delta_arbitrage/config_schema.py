"""
Strategy parameter schema validation using Pydantic.

All amounts are written in whole native-currency units (as in the YAML
config) and exposed in subunits through properties.
"""

from typing import Dict, Optional

from pydantic import BaseModel, Field, model_validator

from .constants import (
    DEFAULT_DIFF_THRESHOLD_PCT,
    DEFAULT_MIN_GAIN,
    DEFAULT_MIN_NATIVE_BALANCE,
    DEFAULT_MIN_WRAPPED_BALANCE,
    DEFAULT_MULTI_HOP_COST,
    DEFAULT_SELL_SLIPPAGE,
    DEFAULT_SINGLE_HOP_COST,
    DEFAULT_TOP_UP_AMOUNT,
    DEFAULT_UNWRAP_AMOUNT,
)
from .utils import to_subunits


class StrategyConfig(BaseModel):
    """Thresholds, costs and top-up quanta injected into the engine."""

    diff_threshold_pct: float = Field(
        default=DEFAULT_DIFF_THRESHOLD_PCT,
        ge=0,
        description="Minimum |market/fair - 1| in percent before a route fires",
    )
    min_gain: float = Field(
        default=DEFAULT_MIN_GAIN, description="Minimum estimated net gain to trade"
    )
    multi_hop_cost: float = Field(default=DEFAULT_MULTI_HOP_COST, ge=0)
    single_hop_cost: float = Field(default=DEFAULT_SINGLE_HOP_COST, ge=0)
    top_up_amount: float = Field(default=DEFAULT_TOP_UP_AMOUNT, gt=0)
    min_native_balance: float = Field(default=DEFAULT_MIN_NATIVE_BALANCE, ge=0)
    min_wrapped_balance: float = Field(default=DEFAULT_MIN_WRAPPED_BALANCE, ge=0)
    unwrap_amount: float = Field(default=DEFAULT_UNWRAP_AMOUNT, gt=0)
    sell_slippage: float = Field(
        default=DEFAULT_SELL_SLIPPAGE,
        ge=0,
        lt=1,
        description="Extra input allowed when selling positions for wrapped native",
    )

    @model_validator(mode="after")
    def validate_hop_costs(self):
        if self.multi_hop_cost < self.single_hop_cost:
            raise ValueError("multi_hop_cost must not be below single_hop_cost")
        return self

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }

    @property
    def top_up_subunits(self) -> int:
        return to_subunits(self.top_up_amount)

    @property
    def min_native_subunits(self) -> int:
        return to_subunits(self.min_native_balance)

    @property
    def min_wrapped_subunits(self) -> int:
        return to_subunits(self.min_wrapped_balance)

    @property
    def unwrap_subunits(self) -> int:
        return to_subunits(self.unwrap_amount)

    def hop_cost(self, multi_hop: bool) -> float:
        """Estimated transaction cost for a route, in native units."""
        return self.multi_hop_cost if multi_hop else self.single_hop_cost

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict]) -> "StrategyConfig":
        """Create config from the ``strategy`` section of the YAML file."""
        return cls(**(config_dict or {}))

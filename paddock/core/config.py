"""
Economy rule configuration.

One canonical rule set, parameterized. Every constant the roster economy
reads lives on EconomyConfig; named rule versions are presets over it.
All settings can be overridden via PADDOCK_<FIELD> environment variables.
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from paddock.core.errors import ConfigurationError


# Rule versions that shipped over the life of the game. Only the fields
# that differ from the current defaults are listed.
RULE_VERSIONS: dict[str, dict] = {
    "v3": {
        "max_change_per_race": 25,
        "contract_length": 0,         # no contracts yet
        "lockout_races": 0,
        "early_termination_rate": 0.0,
        "late_joiner_points_per_race": 0,
        "ace_allows_constructor": False,
    },
    "v5": {
        "early_termination_rate": 0.0,
        "ace_allows_constructor": False,
    },
    "v6": {},
}

CURRENT_VERSION = "v6"


def _env(name: str, default, cast):
    raw = os.getenv(f"PADDOCK_{name.upper()}")
    if raw is None:
        return default
    if cast is bool:
        return raw.lower() in ("1", "true", "yes")
    return cast(raw)


@dataclass
class EconomyConfig:
    """Tunable constants for pricing, contracts, transfers and scoring."""

    version: str = CURRENT_VERSION

    # Pricing
    rolling_window: int = 5
    sprint_weight: float = 0.75
    dollars_per_point: int = 10
    min_price: int = 3
    max_price: int = 500
    max_change_per_race: int = 25
    races_per_season: int = 24
    tier_a_threshold: int = 100   # price above this is A-tier
    tier_b_threshold: int = 50    # above this (but <= A) is B-tier

    # Roster
    starting_budget: int = 1000
    roster_size: int = 5

    # Ace / captain
    ace_multiplier: float = 2.0
    ace_price_ceiling: int = 100
    ace_allows_constructor: bool = True

    # Stale roster
    stale_roster_threshold: int = 5
    stale_roster_penalty: int = 5

    # Hot hand
    hot_hand_bonus: int = 10
    hot_hand_podium_bonus: int = 15
    hot_hand_threshold: int = 15
    constructor_hot_hand: bool = False

    # Transfers
    value_capture_rate: int = 5
    sale_commission_rate: float = 0.05
    early_termination_rate: float = 0.05

    # Contracts
    contract_length: int = 5
    lockout_races: int = 1

    # Catch-up
    late_joiner_points_per_race: int = 30

    # Results
    fastest_lap_bonus: int = 1
    position_gained_bonus: int = 1
    dsq_penalty: int = -5

    @classmethod
    def for_version(cls, version: str, **overrides) -> "EconomyConfig":
        """Build the preset for a named rule version."""
        if version not in RULE_VERSIONS:
            raise ConfigurationError([f"Unknown rule version: {version}"])
        config = cls(version=version, **RULE_VERSIONS[version])
        return replace(config, **overrides) if overrides else config

    @classmethod
    def from_env(cls) -> "EconomyConfig":
        """Create config from environment variables."""
        version = os.getenv("PADDOCK_VERSION", CURRENT_VERSION)
        base = cls.for_version(version)
        overrides = {}
        for f in fields(cls):
            if f.name == "version":
                continue
            current = getattr(base, f.name)
            value = _env(f.name, current, type(current))
            if value != current:
                overrides[f.name] = value
        return replace(base, **overrides)

    @property
    def contracts_enabled(self) -> bool:
        return self.contract_length > 0

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []
        if self.rolling_window < 1:
            errors.append("rolling_window must be at least 1")
        if not 0 < self.sprint_weight <= 1:
            errors.append("sprint_weight must be in (0, 1]")
        if self.dollars_per_point <= 0:
            errors.append("dollars_per_point must be positive")
        if self.min_price < 0:
            errors.append("min_price cannot be negative")
        if self.max_price < self.min_price:
            errors.append("max_price must be >= min_price")
        if self.max_change_per_race < 0:
            errors.append("max_change_per_race cannot be negative")
        if self.races_per_season < 1:
            errors.append("races_per_season must be at least 1")
        if self.starting_budget < 0:
            errors.append("starting_budget cannot be negative")
        if self.roster_size < 1:
            errors.append("roster_size must be at least 1")
        if self.ace_multiplier < 1:
            errors.append("ace_multiplier must be >= 1")
        if self.stale_roster_threshold < 0 or self.stale_roster_penalty < 0:
            errors.append("stale roster threshold and penalty cannot be negative")
        if not 0 <= self.sale_commission_rate < 1:
            errors.append("sale_commission_rate must be in [0, 1)")
        if self.early_termination_rate < 0:
            errors.append("early_termination_rate cannot be negative")
        if self.contract_length < 0 or self.lockout_races < 0:
            errors.append("contract_length and lockout_races cannot be negative")
        if self.tier_b_threshold > self.tier_a_threshold:
            errors.append("tier_b_threshold must not exceed tier_a_threshold")
        return errors

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


# Singleton config instance
_config: Optional[EconomyConfig] = None


def get_config() -> EconomyConfig:
    """Get the global economy configuration."""
    global _config
    if _config is None:
        _config = EconomyConfig.from_env()
    return _config


def set_config(config: Optional[EconomyConfig]) -> None:
    """
    Replace the global configuration.

    Passing None makes the next get_config() re-read the environment.
    """
    global _config
    _config = config

"""
Kernel configuration.

Root-finder defaults and logging options, loaded from environment variables
prefixed ``NUMERIC_KERNEL_`` (e.g. ``NUMERIC_KERNEL_IRR_MAX_ITERATIONS=50``).
The defaults reproduce the reference outputs; change them only knowingly.
"""
from decimal import Decimal
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class KernelSettings(BaseSettings):
    """
    Settings loaded from environment variables.
    """
    # Root finder (IRR / breakeven)
    irr_initial_guess: Decimal = Decimal("0.10")
    irr_max_iterations: int = Field(default=30, ge=1)
    irr_tolerance: Decimal = Field(default=Decimal("0.0000001"), gt=0)
    rate_lower_bound: Decimal = Decimal("-0.99")
    rate_upper_bound: Decimal = Decimal("10.0")

    # Logging
    log_level: str = "INFO"
    json_logs: bool = False

    model_config = SettingsConfigDict(
        env_prefix="NUMERIC_KERNEL_",
        case_sensitive=False,
        )

    @model_validator(mode="after")
    def _check_rate_bounds(self) -> "KernelSettings":
        if self.rate_lower_bound <= Decimal(-1):
            raise ValueError("rate_lower_bound must keep 1 + rate positive (> -1)")
        if self.rate_lower_bound >= self.rate_upper_bound:
            raise ValueError("rate_lower_bound must be below rate_upper_bound")
        return self

    def root_finder_options(self) -> dict:
        """Keyword arguments for solvers.solve_irr / solvers.irr."""
        return {
            "guess": self.irr_initial_guess,
            "max_iterations": self.irr_max_iterations,
            "tolerance": self.irr_tolerance,
            "lower": self.rate_lower_bound,
            "upper": self.rate_upper_bound,
            }


@lru_cache(maxsize=1)
def get_settings() -> KernelSettings:
    """
    Get the process-wide settings instance.

    Call ``get_settings.cache_clear()`` after changing the environment.
    """
    return KernelSettings()

"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .models.debt import DeferredInterestPolicy

load_dotenv()

DEFAULT_MAX_MONTHS = 600
DEFAULT_MINIMUM_BUFFER = 1.10


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {value!r}") from exc


@dataclass(frozen=True, slots=True)
class PlannerSettings:
    """Tunables handed to the plan generator; never read from the environment directly."""

    max_months: int = DEFAULT_MAX_MONTHS
    minimum_buffer: float = DEFAULT_MINIMUM_BUFFER
    deferred_interest_policy: DeferredInterestPolicy = DeferredInterestPolicy.PROMO_START_BALANCE

    def __post_init__(self) -> None:
        if self.max_months < 1:
            raise ValueError("max_months must be at least 1.")
        if self.minimum_buffer < 1.0:
            raise ValueError("minimum_buffer must be at least 1.0.")


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "DebtPath"
    LOG_FILENAME = "debtpath.log"
    EXPORT_DIRNAME = "exports"

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTPATH_DEV_MODE", default=True)
        self.MAX_MONTHS = _env_int("DEBTPATH_MAX_MONTHS", DEFAULT_MAX_MONTHS)
        self.MINIMUM_BUFFER = _env_float("DEBTPATH_MINIMUM_BUFFER", DEFAULT_MINIMUM_BUFFER)
        policy = os.getenv("DEBTPATH_DEFERRED_INTEREST_POLICY", "promo_start_balance")
        try:
            self.DEFERRED_INTEREST_POLICY = DeferredInterestPolicy(policy.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(p.value for p in DeferredInterestPolicy)
            raise ValueError(
                f"DEBTPATH_DEFERRED_INTEREST_POLICY must be one of: {allowed}"
            ) from exc

    def _resolve_data_dir(self) -> Path:
        """Return the directory where logs and exports live."""

        data_root = os.getenv("DEBTPATH_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def export_dir(self) -> Path:
        return Path(self.DATA_DIR) / self.EXPORT_DIRNAME

    def planner_settings(self) -> PlannerSettings:
        """Expose engine tunables for the plan generator to consume."""

        return PlannerSettings(
            max_months=self.MAX_MONTHS,
            minimum_buffer=self.MINIMUM_BUFFER,
            deferred_interest_policy=self.DEFERRED_INTEREST_POLICY,
        )


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration used by the test-suite."""

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False

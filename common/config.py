"""
SentinelCore Configuration Management
======================================

Centralized configuration for the Sentinel detection pipeline using
Python dataclasses and TOML-based persistence.

Every section maps to one ``[section]`` table in the TOML file.  Missing
keys fall back to the dataclass defaults and unknown keys are ignored,
so a partial file is always valid.

References:
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
    - PEP 681 -- Data Class Transforms (2022).
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib


# ---------------------------------------------------------------------------
# Default configuration file path relative to the SentinelCore root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"


# ========================== Section Configs ================================


@dataclass(frozen=False, slots=True)
class DetectionConfig:
    """Sliding window and rule thresholds.

    Rule thresholds are strict lower bounds: a rule fires when its
    count is *greater than* the threshold.
    """

    window_capacity: int = 500
    analysis_limit: int = 500
    port_scan_threshold: int = 5
    syn_flood_threshold: int = 15
    brute_force_threshold: int = 8
    brute_force_port: int = 22
    sql_signatures: list[str] = field(default_factory=lambda: ["' OR '1'='1"])
    touched_groups_only: bool = False


@dataclass(frozen=False, slots=True)
class LedgerConfig:
    """Alert retention and duplicate suppression."""

    capacity: int = 50
    suppress_window_ms: int = 5000


@dataclass(frozen=False, slots=True)
class AggregatorConfig:
    """Summary time series bucketing."""

    bucket_ms: int = 1000
    max_buckets: int = 30


@dataclass(frozen=False, slots=True)
class SimulatorConfig:
    """Synthetic traffic generator used as the default packet source."""

    interval_ms: int = 200
    burst_min: int = 1
    burst_max: int = 3
    attack_probability: float = 0.05
    incoming_ratio: float = 0.7
    inject_count: int = 15
    seed: Optional[int] = None


@dataclass(frozen=False, slots=True)
class EnrichmentConfig:
    """LLM alert analyst settings.

    The API key itself is never stored in the config file; only the
    name of the environment variable that holds it.
    """

    model: str = "gemini-2.5-flash"
    api_key_env: str = "GEMINI_API_KEY"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta"
    timeout: float = 30.0
    max_retries: int = 2


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Logging and output settings shared by every component."""

    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    output_dir: str = "output"
    debug: bool = False
    version: str = "1.0.0"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class SentinelConfig:
    """Master configuration aggregating all section settings.

    Usage:
        >>> config = SentinelConfig.load()                  # from default path
        >>> config = SentinelConfig.load("custom.toml")     # from custom path
        >>> print(config.detection.window_capacity)
        500
        >>> print(config.ledger.suppress_window_ms)
        5000
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    ledger: LedgerConfig = field(default_factory=LedgerConfig)
    aggregator: AggregatorConfig = field(default_factory=AggregatorConfig)
    simulator: SimulatorConfig = field(default_factory=SimulatorConfig)
    enrichment: EnrichmentConfig = field(default_factory=EnrichmentConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> SentinelConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys gracefully fall back to dataclass
        defaults -- no ``KeyError`` is raised.

        Args:
            path: Filesystem path to a TOML configuration file.
                  Defaults to ``<project_root>/config.toml``.

        Returns:
            A fully-populated :class:`SentinelConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> SentinelConfig:
        """Build a configuration from an already-parsed TOML mapping."""
        return cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            detection=cls._build_section(DetectionConfig, raw.get("detection", {})),
            ledger=cls._build_section(LedgerConfig, raw.get("ledger", {})),
            aggregator=cls._build_section(AggregatorConfig, raw.get("aggregator", {})),
            simulator=cls._build_section(SimulatorConfig, raw.get("simulator", {})),
            enrichment=cls._build_section(EnrichmentConfig, raw.get("enrichment", {})),
        )

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    # ------------------------------------------------------------------ #
    #  Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are silently ignored so that
        forward-compatible config files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> SentinelConfig:
    """Module-level convenience wrapper around :meth:`SentinelConfig.load`.

    Caches the result so that repeated imports share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = SentinelConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]

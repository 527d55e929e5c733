"""Configuration system using pydantic-settings with environment variable loading."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class IndicatorSettings(BaseSettings):
    """Lookback periods for the technical indicator library.

    All fields configurable via INDICATOR_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="INDICATOR_")

    rsi_period: int = 14
    sma_short: int = 20
    sma_medium: int = 50
    sma_long: int = 200
    bollinger_period: int = 20
    bollinger_multiplier: float = 2.0
    avg_volume_window: int = 20  # trailing sessions averaged for avg_volume


class AnalysisSettings(BaseSettings):
    """Stock analysis pipeline configuration.

    Controls series validation, 52-week range derivation, the display window
    returned to the dashboard, and the synthetic fallback provider.
    All fields configurable via ANALYSIS_ environment variable prefix.
    """

    model_config = SettingsConfigDict(env_prefix="ANALYSIS_")

    range_window: int = 252  # ~52 weeks of trading days
    display_days: int = 30
    require_volume: bool = True  # drop samples without a positive volume

    # Fallback quote generation
    fallback_history_days: int = 30
    fallback_seed: int | None = None  # fixed seed for reproducible demo data


class DashboardSettings(BaseSettings):
    """Dashboard API server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    indicators: IndicatorSettings = IndicatorSettings()
    analysis: AnalysisSettings = AnalysisSettings()
    dashboard: DashboardSettings = DashboardSettings()

"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Analytics configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "meraki-intelligence"
    log_level: str = "INFO"

    # Fraud detection
    fraud_amount_threshold: float = 1_000_000  # Rupiah
    fraud_zscore_threshold: float = 3.0

    # Compliance
    compliance_period_days: int = 30
    compliance_min_rate: float = 0.75
    compliance_warning_rate: float = 0.85

    # Forecasting
    forecast_periods_ahead: int = 3
    holt_alpha: float = 0.5
    holt_beta: float = 0.3

    # Clustering
    persona_kmeans_max_iterations: int = 20
    kmeans_seed: int | None = 42

    # Narrative collaborator (offline when no base URL is set)
    narrative_api_base: str | None = None
    narrative_api_key: str | None = None
    narrative_timeout_seconds: float = 10.0


settings = Settings()

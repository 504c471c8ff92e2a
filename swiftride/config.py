"""Centralised application settings loaded from environment / .env file."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage
    data_dir: Path = Path(".")
    users_file: str = "AccountData/users.txt"
    receipts_file: str = "OperatorReceipts/Global_Transactions.txt"

    # Pricing
    commission_rate: float = 0.20  # platform cut of every fare
    default_surge: float = 1.0
    min_surge: float = 0.5
    max_surge: float = 5.0

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "SWIFT_", "extra": "ignore"}

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_file

    @property
    def receipts_path(self) -> Path:
        return self.data_dir / self.receipts_file


settings = Settings()

"""Application configuration loaded from environment variables and .env file."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Values are loaded from environment variables first,
    then from a .env file in the project root as fallback.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    LOG_LEVEL: str = "INFO"

    # Anvil cost tunables
    ANVIL_ITEM_RENAME_COST: int = 1
    ANVIL_UNIT_REPAIR_COST: int = 1
    ANVIL_SACRIFICE_ILLEGAL_COST: int = 1
    ANVIL_ITEM_REPAIR_COST: int = 2
    ANVIL_DEFAULT_ENCHANT_VALUE: int = 1

    # Display cap / affordability ceiling
    ANVIL_LIMIT_REPAIR_COST: bool = False
    ANVIL_LIMIT_REPAIR_VALUE: int = 39
    ANVIL_REMOVE_REPAIR_LIMIT: bool = False

    # Permission node names
    ANVIL_UNSAFE_PERMISSION: str = "ca.affected"
    ANVIL_BYPASS_LEVEL_PERMISSION: str = "ca.bypass.level"
    ANVIL_BYPASS_FUSE_PERMISSION: str = "ca.bypass.fuse"

    # Data tables
    ANVIL_ENCHANT_TABLE_PATH: str = "src/data/enchant_values.json"
    ANVIL_CONFLICT_TABLE_PATH: str = "src/data/enchant_conflicts.json"
    ANVIL_UNIT_REPAIR_TABLE_PATH: Optional[str] = "src/data/unit_repair.json"


settings = Settings()

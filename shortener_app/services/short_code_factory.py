"""
Factory for creating short code derivation strategies.
Uses caching to avoid creating multiple instances.
"""

from enum import Enum
from shortener_app.services.short_code_strategies import (
    ShortCodeStrategy,
    Sha1ShortCodeStrategy,
    Sha256ShortCodeStrategy
)
from shortener_app.config import settings


class ShortCodeStrategyType(Enum):
    """Available short code derivation strategies"""
    SHA1 = "sha1"
    SHA256 = "sha256"


class ShortCodeFactory:
    """Factory for creating short code strategies with caching"""

    _instances = {}  # Cache for strategy instances

    @classmethod
    def create_strategy(
        cls,
        strategy_type: ShortCodeStrategyType = None
    ) -> ShortCodeStrategy:
        """
        Create or return cached short code strategy.

        Args:
            strategy_type: Type of strategy to create.
                          If None, uses value from settings.

        Returns:
            A cached instance of a ShortCodeStrategy

        Raises:
            ValueError: If strategy_type is unknown
        """
        # Use default from settings if not specified
        if strategy_type is None:
            strategy_type = ShortCodeStrategyType(settings.short_code_strategy)

        if strategy_type in cls._instances:
            return cls._instances[strategy_type]

        if strategy_type == ShortCodeStrategyType.SHA1:
            instance = Sha1ShortCodeStrategy()
        elif strategy_type == ShortCodeStrategyType.SHA256:
            instance = Sha256ShortCodeStrategy()
        else:
            raise ValueError(f"Unknown strategy type: {strategy_type}")

        cls._instances[strategy_type] = instance
        return instance


def derive_short_code(original_url: str) -> str:
    """Derive the short code for `original_url` with the configured strategy."""
    return ShortCodeFactory.create_strategy().generate(original_url)

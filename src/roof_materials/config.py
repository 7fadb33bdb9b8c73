"""
Configuration management for roof material estimation and order routing.

Settings come from an optional JSON file and are then overridden by
environment variables.
"""

import os
import json
import logging
from typing import Optional, Dict, Any
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = 0.0825


def _as_bool(value: Any) -> bool:
    """Settings booleans may arrive as JSON booleans or as "true"/"false" strings"""
    return str(value).lower() == 'true'


@dataclass
class OrderConfig:
    """Order drafting settings."""
    tax_rate: float = DEFAULT_TAX_RATE


@dataclass
class RoutingConfig:
    """Branch and inventory lookup settings."""
    branch_search_limit: int = 3
    include_closed_branches: bool = False
    inventory_retry_attempts: int = 3
    inventory_retry_wait: float = 0.5  # seconds, exponential backoff multiplier
    inventory_retry_max_wait: float = 5.0


@dataclass
class SystemConfig:
    """Main system configuration."""
    orders: OrderConfig = field(default_factory=OrderConfig)
    routing: RoutingConfig = field(default_factory=RoutingConfig)

    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"
    version: str = "1.0.0"


class ConfigManager:
    """Configuration manager for handling environment variables and settings."""

    def __init__(self, config_file: Optional[Path] = None):
        self.config_file = config_file or Path(os.getenv('ROOF_MATERIALS_CONFIG', 'roof_materials.json'))
        self.config = SystemConfig()
        self._load_config()

    def _load_config(self):
        """Load configuration from config file and environment variables."""
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    config_data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load config file {self.config_file}: {e}")
            else:
                self._update_config_from_dict(config_data)
                logger.info(f"Loaded configuration from {self.config_file}")

        self._load_from_environment()
        self._validate_config()

    def _update_config_from_dict(self, config_data: Dict[str, Any]):
        """Update configuration from dictionary."""
        if 'orders' in config_data:
            orders_data = config_data['orders']
            self.config.orders.tax_rate = float(orders_data.get('tax_rate', self.config.orders.tax_rate))

        if 'routing' in config_data:
            routing_data = config_data['routing']
            routing = self.config.routing
            routing.branch_search_limit = int(routing_data.get('branch_search_limit', routing.branch_search_limit))
            routing.include_closed_branches = _as_bool(routing_data.get('include_closed_branches', routing.include_closed_branches))
            routing.inventory_retry_attempts = int(routing_data.get('inventory_retry_attempts', routing.inventory_retry_attempts))
            routing.inventory_retry_wait = float(routing_data.get('inventory_retry_wait', routing.inventory_retry_wait))
            routing.inventory_retry_max_wait = float(routing_data.get('inventory_retry_max_wait', routing.inventory_retry_max_wait))

        if 'system' in config_data:
            sys_data = config_data['system']
            self.config.debug = _as_bool(sys_data.get('debug', self.config.debug))
            self.config.environment = sys_data.get('environment', self.config.environment)
            self.config.log_level = sys_data.get('log_level', self.config.log_level)

    def _load_from_environment(self):
        """Load configuration from environment variables."""
        self.config.orders.tax_rate = float(os.getenv('ORDER_TAX_RATE', str(self.config.orders.tax_rate)))

        routing = self.config.routing
        routing.branch_search_limit = int(os.getenv('BRANCH_SEARCH_LIMIT', str(routing.branch_search_limit)))
        routing.include_closed_branches = _as_bool(os.getenv('INCLUDE_CLOSED_BRANCHES', routing.include_closed_branches))
        routing.inventory_retry_attempts = int(os.getenv('INVENTORY_RETRY_ATTEMPTS', str(routing.inventory_retry_attempts)))
        routing.inventory_retry_wait = float(os.getenv('INVENTORY_RETRY_WAIT', str(routing.inventory_retry_wait)))
        routing.inventory_retry_max_wait = float(os.getenv('INVENTORY_RETRY_MAX_WAIT', str(routing.inventory_retry_max_wait)))

        self.config.debug = _as_bool(os.getenv('DEBUG', self.config.debug))
        self.config.environment = os.getenv('ENVIRONMENT', self.config.environment)
        self.config.log_level = os.getenv('LOG_LEVEL', self.config.log_level)

    def _validate_config(self):
        """Validate configuration settings."""
        errors = []

        if not (0 <= self.config.orders.tax_rate < 1):
            errors.append("Order tax_rate must be between 0 and 1")

        if self.config.routing.branch_search_limit < 1:
            errors.append("Routing branch_search_limit must be at least 1")

        if self.config.routing.inventory_retry_attempts < 1:
            errors.append("Routing inventory_retry_attempts must be at least 1")

        if self.config.routing.inventory_retry_wait < 0:
            errors.append("Routing inventory_retry_wait must be non-negative")

        if self.config.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"Invalid log_level {self.config.log_level!r}")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        logger.debug("Configuration validation passed")

    def get_order_config(self) -> OrderConfig:
        """Get order configuration."""
        return self.config.orders

    def get_routing_config(self) -> RoutingConfig:
        """Get routing configuration."""
        return self.config.routing

    def get_system_config(self) -> SystemConfig:
        """Get system configuration."""
        return self.config

    def save_config(self):
        """Save current configuration to file."""
        config_data = {
            'orders': {
                'tax_rate': self.config.orders.tax_rate,
            },
            'routing': {
                'branch_search_limit': self.config.routing.branch_search_limit,
                'include_closed_branches': self.config.routing.include_closed_branches,
                'inventory_retry_attempts': self.config.routing.inventory_retry_attempts,
                'inventory_retry_wait': self.config.routing.inventory_retry_wait,
                'inventory_retry_max_wait': self.config.routing.inventory_retry_max_wait,
            },
            'system': {
                'debug': self.config.debug,
                'environment': self.config.environment,
                'log_level': self.config.log_level,
            }
        }

        try:
            with open(self.config_file, 'w') as f:
                json.dump(config_data, f, indent=2)
            logger.info(f"Configuration saved to {self.config_file}")
        except OSError as e:
            logger.error(f"Failed to save configuration: {e}")
            raise

    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.config.environment == 'production'


def get_config() -> SystemConfig:
    """Get global configuration instance."""
    if not hasattr(get_config, '_instance'):
        get_config._instance = ConfigManager()
    return get_config._instance.get_system_config()


def reset_config():
    """Drop the cached configuration so the next get_config() reloads it."""
    if hasattr(get_config, '_instance'):
        del get_config._instance


def get_order_config() -> OrderConfig:
    """Get order configuration."""
    return get_config().orders


def get_routing_config() -> RoutingConfig:
    """Get routing configuration."""
    return get_config().routing


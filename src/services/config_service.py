"""
Configuration service for loading and validating toolkit settings.
"""
import os
import configparser
from typing import Optional, Dict, Any
import logging

from ..models.config import Config, ConfigValidationError, ConfigValidationResult


class ConfigService:
    """Service for loading and validating toolkit configuration."""

    def __init__(self, config_path: Optional[str] = None):
        self.logger = logging.getLogger(__name__)
        self._config = None
        if config_path:
            self._config = self.load_config(config_path)

    def get_config(self) -> Config:
        """
        Get the loaded configuration.

        Returns:
            Config object

        Raises:
            ValueError: If no configuration has been loaded
        """
        if self._config is None:
            raise ValueError("No configuration loaded. Call load_config() first.")
        return self._config

    def load_config(self, config_path: str) -> Config:
        """
        Load configuration from a property file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid or has validation errors
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        config_data = self._load_config_file(config_path)
        config = self._create_config_from_data(config_data)

        validation_result = self.validate_config(config)

        if validation_result.has_errors():
            error_summary = validation_result.get_error_summary()
            raise ValueError(f"Configuration validation failed:\n{error_summary}")

        if validation_result.has_warnings():
            warning_summary = validation_result.get_error_summary()
            self.logger.warning(f"Configuration warnings:\n{warning_summary}")

        self._config = config
        return config

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """Load configuration data from file."""
        config_parser = configparser.ConfigParser()

        try:
            config_parser.read(config_path)
        except configparser.Error as e:
            raise ValueError(f"Failed to parse configuration file: {e}")

        # Section keys are namespaced as section.key
        config_data = {}
        for section in config_parser.sections():
            for key, value in config_parser.items(section):
                config_data[f"{section}.{key}"] = value

        for key, value in config_parser.defaults().items():
            if key not in config_data:
                config_data[key] = value

        return config_data

    def _create_config_from_data(self, config_data: Dict[str, Any]) -> Config:
        """Create Config object from configuration data."""
        config_mapping = {
            # Generator settings
            "generator.key_size": ("key_size", int),
            "key_size": ("key_size", int),
            "generator.validity_days": ("validity_days", int),
            "validity_days": ("validity_days", int),
            "generator.password": ("default_password", str),
            "default_password": ("default_password", str),
            "generator.id_in_alt_name": ("id_in_alt_name", bool),
            "id_in_alt_name": ("id_in_alt_name", bool),

            # Certificate settings
            "certificate.wrap_width": ("wrap_width", int),
            "wrap_width": ("wrap_width", int),

            # Fake certificate holder
            "fake.id": ("fake_id", str),
            "fake_id": ("fake_id", str),
            "fake.name": ("fake_name", str),
            "fake_name": ("fake_name", str),
            "fake.email": ("fake_email", str),
            "fake_email": ("fake_email", str),

            # Application settings
            "app.log_level": ("log_level", str),
            "log_level": ("log_level", str),
            "app.log_file_path": ("log_file_path", str),
            "log_file_path": ("log_file_path", str),
            "app.json_logs": ("json_logs", bool),
            "json_logs": ("json_logs", bool),
        }

        config_kwargs = {}

        for config_key, raw_value in config_data.items():
            if config_key in config_mapping:
                field_name, field_type = config_mapping[config_key]
                try:
                    if field_type == bool:
                        value = self._parse_bool(raw_value)
                    elif field_type == int:
                        value = int(raw_value)
                    else:
                        value = str(raw_value)

                    config_kwargs[field_name] = value
                except (ValueError, TypeError) as e:
                    raise ValueError(f"Invalid value for {config_key}: {raw_value} ({e})")

        return Config(**config_kwargs)

    def _parse_bool(self, value: Any) -> bool:
        """Parse boolean value from string."""
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "yes", "1", "on", "enabled")
        return bool(value)

    def validate_config(self, config: Config) -> ConfigValidationResult:
        """
        Validate configuration settings.

        Args:
            config: Configuration object to validate

        Returns:
            ConfigValidationResult with validation results
        """
        errors = []
        warnings = []

        if not config.default_password:
            errors.append(ConfigValidationError(
                "default_password",
                "A password is required to protect generated certificates"
            ))

        if not config.fake_id or not config.fake_name or not config.fake_email:
            errors.append(ConfigValidationError(
                "fake",
                "The fake certificate id, name and email are required"
            ))
        elif "-" not in config.fake_id:
            warnings.append(ConfigValidationError(
                "fake_id",
                f"Fake ID {config.fake_id} has no check digit and will fail validation",
                "warning"
            ))

        if config.key_size < 2048:
            warnings.append(ConfigValidationError(
                "key_size",
                "RSA keys shorter than 2048 bits are not accepted by most providers",
                "warning"
            ))

        if config.log_file_path:
            log_dir = os.path.dirname(config.log_file_path)
            if log_dir and not os.path.exists(log_dir):
                warnings.append(ConfigValidationError(
                    "log_file_path",
                    f"Log directory does not exist: {log_dir}",
                    "warning"
                ))

        all_issues = errors + warnings
        return ConfigValidationResult(
            is_valid=len(errors) == 0,
            errors=all_issues,
            warnings=[]
        )

    def create_default_config_file(self, config_path: str) -> None:
        """
        Create a default configuration file with example settings.

        Args:
            config_path: Path where to create the config file
        """
        config_content = """# Certificate Toolkit Configuration File

[generator]
key_size = 2048
validity_days = 365
password = i_love_signatures
id_in_alt_name = false

[certificate]
wrap_width = 64

[fake]
id = 11222333-9
name = Tester Bot
email = tester.bot@example.com

[app]
log_level = INFO
log_file_path =
json_logs = false
"""

        config_dir = os.path.dirname(config_path)
        if config_dir:
            os.makedirs(config_dir, exist_ok=True)

        with open(config_path, 'w') as f:
            f.write(config_content)

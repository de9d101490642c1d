"""
Configuration data models for the certificate toolkit.
"""
from dataclasses import dataclass


@dataclass
class Config:
    """Main configuration class containing all toolkit settings."""

    # Generator settings
    key_size: int = 2048
    validity_days: int = 365
    default_password: str = "i_love_signatures"
    id_in_alt_name: bool = False

    # Certificate settings
    wrap_width: int = 64

    # Fake certificate holder
    fake_id: str = "11222333-9"
    fake_name: str = "Tester Bot"
    fake_email: str = "tester.bot@example.com"

    # Application settings
    log_level: str = "INFO"
    log_file_path: str = ""
    json_logs: bool = False

    def __post_init__(self):
        """Validate configuration after initialization."""
        self._validate_types()

    def _validate_types(self):
        """Ensure all configuration values have correct types."""
        if not isinstance(self.key_size, int) or self.key_size < 1024:
            raise ValueError("key_size must be an integer of at least 1024")

        if not isinstance(self.validity_days, int) or self.validity_days <= 0:
            raise ValueError("validity_days must be a positive integer")

        # PEM readers reject lines longer than 76 characters
        if not isinstance(self.wrap_width, int) or not 0 < self.wrap_width <= 76:
            raise ValueError("wrap_width must be a positive integer no larger than 76")

        if self.log_level not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError("log_level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL")


@dataclass
class ConfigValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    severity: str = "error"  # error, warning

    def __str__(self):
        return f"{self.severity.upper()}: {self.field} - {self.message}"


@dataclass
class ConfigValidationResult:
    """Result of configuration validation."""
    is_valid: bool
    errors: list[ConfigValidationError]
    warnings: list[ConfigValidationError]

    def __post_init__(self):
        """Separate errors and warnings."""
        all_issues = self.errors + self.warnings
        self.errors = [e for e in all_issues if e.severity == "error"]
        self.warnings = [e for e in all_issues if e.severity == "warning"]

    def has_errors(self) -> bool:
        """Check if there are any validation errors."""
        return len(self.errors) > 0

    def has_warnings(self) -> bool:
        """Check if there are any validation warnings."""
        return len(self.warnings) > 0

    def get_error_summary(self) -> str:
        """Get a formatted summary of all errors and warnings."""
        lines = []

        if self.errors:
            lines.append("Configuration Errors:")
            for error in self.errors:
                lines.append(f"  - {error}")

        if self.warnings:
            lines.append("Configuration Warnings:")
            for warning in self.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines) if lines else "Configuration is valid"

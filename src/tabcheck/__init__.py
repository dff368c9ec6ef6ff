from .csvcheck import Rule, ValidationConfig, ValidationResult, validate_text

__version__ = "0.1.0"

"""Configuration store for SnapMark Bridge."""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError as PydanticValidationError

from ..models.endpoint_config import AppConfig, EndpointConfiguration
from ..utils.logging_config import get_logger, get_error_logger
from ..validation.form_validators import ConfigurationValidator, ValidationResult


logger = get_logger(__name__)


class ConfigurationValidationError(Exception):
    """Raised when settings fail validation; nothing is written."""

    def __init__(self, result: ValidationResult):
        super().__init__(result.summary())
        self.result = result


class ConfigurationService:
    """Reads and writes the flat configuration file."""

    def __init__(self, config_path: str = None):
        """Initialize the configuration service.

        Args:
            config_path: Path to the JSON configuration file
        """
        self.config_path = Path(config_path or "data/config.json")
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._validator = ConfigurationValidator()
        self._cipher = Fernet(self._get_or_create_encryption_key())

    def _get_or_create_encryption_key(self) -> bytes:
        """Get or create encryption key for API keys."""
        key_file = self.config_path.parent / ".encryption_key"

        if key_file.exists():
            return key_file.read_bytes().strip()

        key = Fernet.generate_key()
        key_file.write_bytes(key)
        try:
            os.chmod(key_file, 0o600)
        except OSError:
            logger.warning(f"Could not restrict permissions on {key_file}")
        return key

    def _encrypt_api_key(self, api_key: str) -> str:
        """Encrypt API key for storage."""
        if not api_key:
            return ""
        return self._cipher.encrypt(api_key.encode()).decode()

    def _decrypt_api_key(self, encrypted_key: str) -> str:
        """Decrypt API key from storage."""
        if not encrypted_key:
            return ""
        try:
            return self._cipher.decrypt(encrypted_key.encode()).decode()
        except InvalidToken:
            logger.warning("Stored API key could not be decrypted; treating it as empty")
            return ""

    def get_config(self) -> AppConfig:
        """Read the stored configuration.

        Returns:
            AppConfig from disk, or defaults when the file is missing or unreadable
        """
        if not self.config_path.exists():
            return AppConfig()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            get_error_logger().log_configuration_error(str(self.config_path), str(e), operation="read")
            return AppConfig()

        if not isinstance(data, dict):
            get_error_logger().log_configuration_error(
                str(self.config_path), "top-level value is not an object", operation="read"
            )
            return AppConfig()

        data['api_key'] = self._decrypt_api_key(data.get('api_key') or "")
        try:
            return AppConfig.from_dict(data)
        except PydanticValidationError as e:
            get_error_logger().log_configuration_error(str(self.config_path), str(e), operation="read")
            return AppConfig()

    def load_config(self) -> EndpointConfiguration:
        """Fresh endpoint snapshot for a single operation."""
        return self.get_config().to_endpoint()

    def update_config(self, new_config: AppConfig) -> AppConfig:
        """Validate and store a complete configuration.

        Args:
            new_config: Configuration to store

        Returns:
            The stored configuration

        Raises:
            ConfigurationValidationError: if validation fails
        """
        result = self._validator.validate_app_config(new_config)
        if not result.is_valid:
            error_logger = get_error_logger()
            for error in result.errors:
                error_logger.log_validation_error(
                    field=error.field,
                    value=str(getattr(new_config, error.field, "")),
                    error_message=error.message,
                    form_type="configuration"
                )
            raise ConfigurationValidationError(result)

        for warning in result.warnings:
            logger.warning(f"Configuration warning on {warning.field}: {warning.message}")

        self._write(new_config)
        logger.info(
            f"Configuration saved: base_url={new_config.api_base_url}, "
            f"service_type={new_config.service_type.value}, api_key={new_config.mask_api_key() or '<none>'}"
        )
        return new_config

    def update_fields(self, changes: Dict[str, Any]) -> AppConfig:
        """Apply a partial update on top of the stored configuration.

        Fields missing from ``changes`` (or set to None) keep their stored value,
        so an omitted API key is never wiped.
        """
        current = self.get_config().to_dict()
        current.update({key: value for key, value in changes.items() if value is not None})
        return self.update_config(AppConfig.from_dict(current))

    def select_model(self, model_id: str) -> AppConfig:
        """Store the model chosen by the user.

        Raises:
            ConfigurationValidationError: if model_id is blank
        """
        model_id = model_id.strip()
        if not model_id:
            result = ValidationResult(is_valid=True, errors=[], warnings=[])
            result.add_error("model", "Model cannot be empty", "empty")
            raise ConfigurationValidationError(result)

        config = self.get_config()
        config.model = model_id
        self.update_config(config)
        logger.info(f"Selected model: {config.model}")
        return config

    def _write(self, config: AppConfig) -> None:
        """Write atomically so readers never see a partial file."""
        data = config.to_dict()
        data['api_key'] = self._encrypt_api_key(config.api_key)

        with self._lock:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.config_path.parent), prefix=".config-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.config_path)
            except Exception:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise

    def get_public_config(self) -> Dict[str, Any]:
        """Stored configuration with the API key masked."""
        return self.get_config().to_public_dict()

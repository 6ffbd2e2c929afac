"""Unit tests for ConfigurationService."""

import json
import os
import threading

import pytest

from src.config.configuration_service import ConfigurationService, ConfigurationValidationError
from src.models.endpoint_config import AppConfig, DEFAULT_HOTKEY, DEFAULT_TIMEOUT_SECONDS
from src.models.enums import ServiceType


class TestConfigurationService:
    """Test cases for ConfigurationService."""

    @pytest.fixture
    def sample_config(self):
        """Create a sample configuration."""
        return AppConfig(
            api_base_url="https://api.openai.com/v1",
            api_key="sk-test1234567890",
            service_type=ServiceType.OPENAI,
            model="gpt-4o",
            prompt="Transcribe the formula.",
            hotkey="ctrl+alt+m",
            sound_enabled=False,
            request_timeout_seconds=15.0
        )

    def test_defaults_when_no_file(self, config_service):
        """A missing file reads as the default configuration."""
        config = config_service.get_config()

        assert config.api_base_url == "http://127.0.0.1:11434/v1"
        assert config.api_key == ""
        assert config.model == ""
        assert config.hotkey == DEFAULT_HOTKEY
        assert config.sound_enabled is True
        assert config.request_timeout_seconds == DEFAULT_TIMEOUT_SECONDS

    def test_save_and_get_config(self, config_service, sample_config):
        """Test saving and retrieving a configuration."""
        config_service.update_config(sample_config)

        retrieved = config_service.get_config()
        assert retrieved == sample_config

    def test_api_key_is_encrypted_on_disk(self, config_service, config_path, sample_config):
        """The raw key never appears in the configuration file."""
        config_service.update_config(sample_config)

        with open(config_path, encoding="utf-8") as f:
            raw = f.read()
        assert "sk-test1234567890" not in raw
        assert json.loads(raw)["api_key"]
        assert os.path.exists(os.path.join(os.path.dirname(config_path), ".encryption_key"))

    def test_key_survives_new_service_instance(self, config_path, sample_config):
        """A second instance reuses the stored encryption key."""
        ConfigurationService(config_path).update_config(sample_config)

        assert ConfigurationService(config_path).get_config().api_key == "sk-test1234567890"

    def test_undecryptable_key_reads_as_empty(self, config_service, config_path, sample_config):
        """A key encrypted with another key file reads as empty."""
        config_service.update_config(sample_config)
        os.unlink(os.path.join(os.path.dirname(config_path), ".encryption_key"))

        fresh = ConfigurationService(config_path)
        config = fresh.get_config()
        assert config.api_key == ""
        assert config.model == "gpt-4o"

    def test_corrupt_file_reads_as_defaults(self, config_service, config_path):
        """Unreadable JSON falls back to defaults instead of failing."""
        with open(config_path, "w", encoding="utf-8") as f:
            f.write("{not json")

        assert config_service.get_config() == AppConfig()

    def test_non_object_file_reads_as_defaults(self, config_service, config_path):
        """A JSON file that is not an object falls back to defaults."""
        with open(config_path, "w", encoding="utf-8") as f:
            f.write("[1, 2, 3]")

        assert config_service.get_config() == AppConfig()

    def test_load_config_returns_fresh_snapshot(self, config_service, sample_config):
        """Each load reflects the latest write."""
        config_service.update_config(sample_config)
        first = config_service.load_config()

        sample_config.api_base_url = "https://openrouter.ai/api/v1"
        config_service.update_config(sample_config)
        second = config_service.load_config()

        assert first.base_url == "https://api.openai.com/v1"
        assert second.base_url == "https://openrouter.ai/api/v1"
        assert second.api_key == "sk-test1234567890"
        assert second.timeout == 15.0
        assert second.service_type == ServiceType.OPENAI

    def test_empty_api_key_projects_to_none(self, config_service):
        """An empty stored key means no credential."""
        assert config_service.load_config().api_key is None

    @pytest.mark.parametrize("field, value", [
        ("api_base_url", "not-a-url"),
        ("api_base_url", ""),
        ("request_timeout_seconds", 0),
        ("request_timeout_seconds", -1),
        ("prompt", "   "),
        ("hotkey", ""),
    ])
    def test_invalid_config_is_not_written(self, config_service, config_path, sample_config, field, value):
        """Validation failures raise and leave the file untouched."""
        setattr(sample_config, field, value)

        with pytest.raises(ConfigurationValidationError) as exc_info:
            config_service.update_config(sample_config)

        assert exc_info.value.result.get_field_errors(field)
        assert not os.path.exists(config_path)

    def test_update_fields_keeps_omitted_values(self, config_service, sample_config):
        """Partial updates keep the stored key when it is not provided."""
        config_service.update_config(sample_config)

        updated = config_service.update_fields({"model": "gpt-4o-mini", "api_key": None})

        assert updated.model == "gpt-4o-mini"
        assert updated.api_key == "sk-test1234567890"
        assert config_service.get_config().prompt == "Transcribe the formula."

    def test_update_fields_can_clear_api_key(self, config_service, sample_config):
        """An explicit empty key clears the stored one."""
        sample_config.service_type = ServiceType.OPENAI_COMPATIBLE
        sample_config.api_base_url = "http://127.0.0.1:1234/v1"
        config_service.update_config(sample_config)

        updated = config_service.update_fields({"api_key": ""})

        assert updated.api_key == ""

    def test_select_model(self, config_service, sample_config):
        """The selected model is persisted."""
        config_service.update_config(sample_config)

        config_service.select_model("  gpt-4.1  ")

        assert config_service.get_config().model == "gpt-4.1"

    def test_select_blank_model_is_rejected(self, config_service, sample_config):
        """A blank id raises and the stored model is kept."""
        config_service.update_config(sample_config)

        with pytest.raises(ConfigurationValidationError) as exc_info:
            config_service.select_model("   ")

        assert exc_info.value.result.get_field_errors("model")
        assert config_service.get_config().model == "gpt-4o"

    def test_public_config_masks_key(self, config_service, sample_config):
        """The front end never receives the raw key."""
        config_service.update_config(sample_config)

        public = config_service.get_public_config()

        assert public["api_key"] != "sk-test1234567890"
        assert public["api_key"].startswith("sk-t")
        assert public["has_api_key"] is True
        assert public["service_type"] == "openai"

    def test_no_temp_files_left_behind(self, config_service, config_path, sample_config):
        """Atomic writes clean up after themselves."""
        config_service.update_config(sample_config)
        config_service.update_config(sample_config)

        leftovers = [name for name in os.listdir(os.path.dirname(config_path)) if name.endswith(".tmp")]
        assert leftovers == []

    def test_concurrent_writes_leave_valid_file(self, config_service, sample_config):
        """Concurrent writers never corrupt the file."""
        def write(index):
            config = sample_config.model_copy(update={"model": f"model-{index}"})
            config_service.update_config(config)

        threads = [threading.Thread(target=write, args=(i,)) for i in range(10)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert config_service.get_config().model.startswith("model-")

    def test_service_type_fills_default_base_url(self):
        """A missing base URL is filled from the service type."""
        config = AppConfig.from_dict({"service_type": "lmstudio", "api_base_url": ""})

        assert config.api_base_url == "http://127.0.0.1:1234/v1"

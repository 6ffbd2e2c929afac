"""Runtime settings read from the environment."""

import os
from pathlib import Path

from pydantic import BaseModel, Field

from ..models.endpoint_config import DEFAULT_TIMEOUT_SECONDS


class RuntimeSettings(BaseModel):
    """Process-level settings, as opposed to the user's stored configuration."""

    data_dir: str = Field("data", description="Directory holding the configuration file")
    config_path: str = Field("", description="Configuration file, defaults to <data_dir>/config.json")
    host: str = Field("127.0.0.1", description="Interface the command server binds to")
    port: int = Field(4390, description="Port of the command server")
    request_timeout_seconds: float = Field(
        DEFAULT_TIMEOUT_SECONDS, description="Timeout used when a configuration carries none"
    )
    log_level: str = Field("INFO", description="Logging level")

    def resolved_config_path(self) -> Path:
        return Path(self.config_path) if self.config_path else Path(self.data_dir) / "config.json"

    @classmethod
    def from_env(cls) -> 'RuntimeSettings':
        """Build settings from environment variables (after .env is loaded)."""
        data_dir = os.getenv('DATA_DIR', 'data')
        return cls(
            data_dir=data_dir,
            config_path=os.getenv('CONFIG_PATH', ''),
            host=os.getenv('BRIDGE_HOST', '127.0.0.1'),
            port=int(os.getenv('BRIDGE_PORT', '4390')),
            request_timeout_seconds=float(os.getenv('REQUEST_TIMEOUT_SECONDS', str(DEFAULT_TIMEOUT_SECONDS))),
            log_level=os.getenv('LOG_LEVEL', 'INFO').upper()
        )

"""Configuration management for the Trello to Asana Migration Tool."""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, validator


class AsanaConfig(BaseModel):
    """Configuration for the destination Asana workspace."""

    personal_access_token: str = Field(..., description='Asana personal access token')
    workspace: Optional[str] = Field(
        default=None, description='Workspace gid (listed when unset)'
    )
    team: Optional[str] = Field(default=None, description='Team gid (listed when unset)')
    base_url: str = Field(
        default='https://app.asana.com/api/1.0', description='Asana API base URL'
    )
    timeout: int = Field(default=60, description='Request timeout in seconds')
    rate_limit_per_second: float = Field(
        default=2.5, description='API requests per second limit'
    )

    @validator('personal_access_token')
    def validate_token(cls, v):
        """Reject blank tokens."""
        if not v or not v.strip():
            raise ValueError('personal_access_token must not be empty')
        return v.strip()

    @validator('workspace', 'team', pre=True)
    def coerce_gid(cls, v):
        """Accept numeric gids from hand-written config files."""
        if v is None or v == '':
            return None
        return str(v)

    @validator('base_url')
    def validate_url(cls, v):
        """Validate API URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @validator('timeout', 'rate_limit_per_second')
    def validate_positive(cls, v):
        """Validate timeouts and rates are positive."""
        if v <= 0:
            raise ValueError('Value must be positive')
        return v


class TrelloConfig(BaseModel):
    """Configuration for the source Trello API (card activity and attachments)."""

    key: str = Field(..., description='Trello API key')
    token: str = Field(..., description='Trello API token')
    base_url: str = Field(
        default='https://api.trello.com/1', description='Trello API base URL'
    )
    timeout: int = Field(default=60, description='Request timeout in seconds')
    rate_limit_per_second: float = Field(
        default=10.0, description='API requests per second limit'
    )

    @validator('base_url')
    def validate_url(cls, v):
        """Validate API URL format."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v.rstrip('/')

    @validator('timeout', 'rate_limit_per_second')
    def validate_positive(cls, v):
        """Validate timeouts and rates are positive."""
        if v <= 0:
            raise ValueError('Value must be positive')
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default='INFO', description='Log level')
    file: Optional[str] = Field(default=None, description='Log file path')
    format: Optional[str] = Field(default=None, description='Log format')

    @validator('level')
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'Log level must be one of: {valid_levels}')
        return v.upper()


class Config(BaseModel):
    """Main configuration class for the Trello to Asana Migration Tool."""

    asana: AsanaConfig = Field(..., description='Destination Asana settings')
    trello: TrelloConfig = Field(..., description='Source Trello settings')
    member: Dict[str, str] = Field(
        default_factory=dict,
        description='Trello member id to Asana user gid translation table',
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description='Logging settings'
    )

    class Config:
        """Pydantic configuration."""

        extra = 'ignore'  # Unknown top-level sections are skipped

    @validator('member', pre=True)
    def coerce_member_gids(cls, v):
        """Asana gids are strings, config files sometimes hold numbers."""
        if v is None:
            return {}
        return {str(key): str(value) for key, value in v.items()}

    @classmethod
    def from_file(cls, config_path: str) -> 'Config':
        """Load configuration from a JSON or YAML file."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')

        with open(config_file, 'r', encoding='utf-8') as f:
            if config_file.suffix.lower() in ('.yaml', '.yml'):
                config_data = yaml.safe_load(f)
            else:
                config_data = json.load(f)

        if not isinstance(config_data, dict):
            raise ValueError(f'Configuration file is not a mapping: {config_path}')

        return cls(**config_data)

    @classmethod
    def from_env(cls) -> 'Config':
        """Load configuration from environment variables."""
        # Load .env file if it exists
        load_dotenv()

        config_data = {
            'asana': {
                'personal_access_token': os.getenv('ASANA_PERSONAL_ACCESS_TOKEN'),
                'workspace': os.getenv('ASANA_WORKSPACE'),
                'team': os.getenv('ASANA_TEAM'),
            },
            'trello': {
                'key': os.getenv('TRELLO_KEY'),
                'token': os.getenv('TRELLO_TOKEN'),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', 'INFO'),
                'file': os.getenv('LOG_FILE'),
            },
        }

        # Remove None values
        config_data = cls._remove_none_values(config_data)

        return cls(**config_data)

    @staticmethod
    def _remove_none_values(data: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively remove None values from dictionary."""
        if isinstance(data, dict):
            return {
                k: Config._remove_none_values(v)
                for k, v in data.items()
                if v is not None
            }
        return data

# mobilectl/core/config_loader.py

"""Configuration file discovery, loading and saving"""

import logging
import os
import shutil
from pathlib import Path
from typing import Optional, Tuple, Union

import yaml

from ..api.exceptions import ConfigError, ConfigParseError, ValidationError
from ..constants import CONFIG_FILE_CANDIDATES, DEFAULT_CONFIG_FILE, ENV_CONFIG_PATH
from ..models.config import Config
from ..models.result import ValidationResult
from .validation_engine import ConfigValidator

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Locate and read ``mobileops.yml``"""

    def __init__(self, base_dir: Union[str, Path, None] = None,
                 config_path: Union[str, Path, None] = None):
        """Initialize config loader

        Args:
            base_dir: Project root directory
            config_path: Explicit config file, overrides discovery
        """
        self.base_dir = Path(base_dir or Path.cwd())
        explicit = config_path or os.environ.get(ENV_CONFIG_PATH)
        self.explicit_path = Path(explicit) if explicit else None
        if self.explicit_path is not None and not self.explicit_path.is_absolute():
            self.explicit_path = self.base_dir / self.explicit_path

    def find(self) -> Optional[Path]:
        """Return the config file path, or None when there is none"""
        if self.explicit_path is not None:
            return self.explicit_path if self.explicit_path.is_file() else None

        for candidate in CONFIG_FILE_CANDIDATES:
            path = self.base_dir / candidate
            if path.is_file():
                return path
        return None

    @property
    def target_path(self) -> Path:
        """Where the config lives or would be created"""
        return self.find() or self.explicit_path or self.base_dir / DEFAULT_CONFIG_FILE

    def load(self) -> Config:
        """Load configuration

        A missing file is not an error; all defaults apply.

        Returns:
            Loaded configuration

        Raises:
            ConfigError: Explicitly requested file does not exist
            ConfigParseError: Invalid YAML or a non-mapping document
        """
        path = self.find()
        if path is None:
            if self.explicit_path is not None:
                raise ConfigError(f"Configuration file not found: {self.explicit_path}")
            logger.warning(
                f"No configuration file found in {self.base_dir}, using defaults"
            )
            return Config()

        logger.debug(f"Loading configuration from {path}")
        return self.load_file(path)

    @staticmethod
    def load_file(path: Path) -> Config:
        """Parse one config file"""
        with open(path, 'r', encoding='utf-8') as f:
            content = f.read()

        # Unset variables are left verbatim
        content = os.path.expandvars(content)

        try:
            data = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigParseError(f"Invalid YAML in {path}: {e}", str(path))

        if data is None:
            return Config()
        if not isinstance(data, dict):
            raise ConfigParseError(
                f"Configuration root must be a mapping, got {type(data).__name__}",
                str(path)
            )

        try:
            return Config.from_dict(data)
        except (TypeError, ValueError, AttributeError) as e:
            raise ConfigParseError(f"Invalid configuration in {path}: {e}", str(path))

    def load_and_validate(self, validator: Optional[ConfigValidator] = None) -> Tuple[Config, ValidationResult]:
        """Load and validate configuration

        Raises:
            ValidationError: Configuration has errors
        """
        config = self.load()
        validator = validator or ConfigValidator()
        result = validator.validate(config, self.base_dir)

        for warning in result.warnings:
            logger.warning(str(warning))

        if not result.is_valid:
            raise ValidationError(
                f"Configuration has {len(result.errors)} error(s)",
                result.errors
            )
        return config, result

    def save(self, config: Config, path: Union[str, Path, None] = None) -> Path:
        """Save configuration to file

        The previous file is kept as ``<name>.bak``.

        Args:
            config: Configuration to save
            path: Destination, defaults to the discovered file

        Returns:
            Path written
        """
        path = Path(path) if path else self.target_path

        if path.exists():
            backup_path = path.with_name(path.name + '.bak')
            shutil.copy2(path, backup_path)

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w', encoding='utf-8') as f:
            yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False,
                      allow_unicode=True)

        logger.info(f"Configuration saved to {path}")
        return path

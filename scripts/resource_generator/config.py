"""
Configuration management for the resource generator.
Supports TOML, JSON and YAML configuration files with validation.
"""

import os
import json
import tomllib
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Union
from pathlib import Path

import yaml

from .utils.locale import DEFAULT_DEVELOPMENT_LOCALE

ENV_PREFIX = "RESOURCE_GENERATOR_"

DEFAULT_CONFIG_FILES = [
    Path("resource_generator.toml"),
    Path("resource_generator.json"),
    Path("resource_generator.yaml"),
    Path("resource_generator.yml"),
]


@dataclass
class OutputConfig:
    """One generated file: where it goes and which template produces it."""
    output: str
    template_name: Optional[str] = None
    template_path: Optional[str] = None

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "OutputConfig":
        if not isinstance(data, dict):
            raise ValueError(f"Output entry must be a table, got {type(data).__name__}")
        if not data.get('output'):
            raise ValueError("Output entry is missing 'output'")
        # Original config files use camelCase keys
        return cls(
            output=str(data['output']),
            template_name=data.get('template_name', data.get('templateName')),
            template_path=data.get('template_path', data.get('templatePath')),
        )


@dataclass
class ResourceConfig:
    """Inputs of one resource kind and the files generated from them."""
    inputs: List[str] = field(default_factory=list)
    outputs: List[OutputConfig] = field(default_factory=list)

    @classmethod
    def _from_dict(cls, data: Dict[str, Any]) -> "ResourceConfig":
        if not isinstance(data, dict):
            raise ValueError(f"Resource section must be a table, got {type(data).__name__}")

        # inputs can be either a single string or a list of strings
        inputs = data.get('inputs', [])
        if isinstance(inputs, str):
            inputs = [inputs]

        outputs = data.get('outputs', [])
        if isinstance(outputs, dict):
            outputs = [outputs]

        return cls(
            inputs=[str(item) for item in inputs],
            outputs=[OutputConfig._from_dict(item) for item in outputs],
        )


@dataclass
class GeneratorConfig:
    """Main configuration class for the resource generator."""

    # Resource sections
    strings: Optional[ResourceConfig] = None
    xcassets: Optional[ResourceConfig] = None

    # Locale settings
    development_locale: str = DEFAULT_DEVELOPMENT_LOCALE

    # Asset settings
    bundle: str = "main"

    # Templates
    template_dir: Optional[str] = None

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "GeneratorConfig":
        """Load configuration from a TOML, JSON or YAML file."""
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        suffix = config_path.suffix.lower()
        if suffix == '.toml':
            return cls._from_toml(config_path)
        elif suffix == '.json':
            return cls._from_json(config_path)
        elif suffix in ('.yaml', '.yml'):
            return cls._from_yaml(config_path)
        else:
            raise ValueError(f"Unsupported configuration format: {config_path.suffix}")

    @classmethod
    def _from_toml(cls, config_path: Path) -> "GeneratorConfig":
        """Load configuration from TOML file."""
        with open(config_path, 'rb') as f:
            data = tomllib.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_json(cls, config_path: Path) -> "GeneratorConfig":
        """Load configuration from JSON file."""
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        return cls._from_dict(data)

    @classmethod
    def _from_yaml(cls, config_path: Path) -> "GeneratorConfig":
        """Load configuration from YAML file."""
        with open(config_path, 'r', encoding='utf-8') as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in {config_path}: {e}") from e
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: Any) -> "GeneratorConfig":
        """Create configuration from dictionary."""
        if not isinstance(data, dict):
            raise ValueError("Root of configuration must be a table")

        config_data = {}

        # Handle resource sections
        if data.get('strings') is not None:
            config_data['strings'] = ResourceConfig._from_dict(data['strings'])
        if data.get('xcassets') is not None:
            config_data['xcassets'] = ResourceConfig._from_dict(data['xcassets'])

        # Handle generator settings
        if 'development_locale' in data:
            config_data['development_locale'] = str(data['development_locale'])
        if 'bundle' in data:
            config_data['bundle'] = str(data['bundle'])
        if data.get('template_dir') is not None:
            config_data['template_dir'] = str(data['template_dir'])

        return cls(**config_data)

    @classmethod
    def default(cls) -> "GeneratorConfig":
        """Create default configuration with environment variable overrides."""
        return cls._apply_env_overrides(cls())

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Create configuration from environment variables only."""
        config = cls()
        return cls._apply_env_overrides(config)

    @classmethod
    def _apply_env_overrides(cls, config: "GeneratorConfig") -> "GeneratorConfig":
        """Apply environment variable overrides to configuration."""
        if os.getenv(f'{ENV_PREFIX}DEVELOPMENT_LOCALE'):
            config.development_locale = os.getenv(f'{ENV_PREFIX}DEVELOPMENT_LOCALE', DEFAULT_DEVELOPMENT_LOCALE)

        if os.getenv(f'{ENV_PREFIX}BUNDLE'):
            config.bundle = os.getenv(f'{ENV_PREFIX}BUNDLE', 'main')

        if os.getenv(f'{ENV_PREFIX}TEMPLATE_DIR'):
            config.template_dir = os.getenv(f'{ENV_PREFIX}TEMPLATE_DIR')

        return config

    def validate(self) -> List[str]:
        """Validate configuration and return list of errors."""
        errors = []

        if self.strings is None and self.xcassets is None:
            errors.append("configuration must define a 'strings' or 'xcassets' section")

        for section_name, section in (('strings', self.strings), ('xcassets', self.xcassets)):
            if section is None:
                continue
            if not section.inputs:
                errors.append(f"{section_name}.inputs must list at least one path")
            if not section.outputs:
                errors.append(f"{section_name}.outputs must list at least one output")
            for index, output in enumerate(section.outputs):
                if not output.output:
                    errors.append(f"{section_name}.outputs[{index}] must set 'output'")

        if not self.development_locale.strip():
            errors.append("development_locale must not be empty")

        if not self.bundle.strip():
            errors.append("bundle must not be empty")

        if self.template_dir and not Path(self.template_dir).is_dir():
            errors.append(f"template_dir does not exist: {self.template_dir}")

        return errors

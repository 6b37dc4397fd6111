import os
import json
import re
import yaml
import logging
from dataclasses import dataclass
from typing import Dict, List, Any, Optional

logger = logging.getLogger('slide2pdf')

DEFAULT_QUALITY = 90
DEFAULT_HEIGHT = 768
DEFAULT_WIDTH = 1025
DEFAULT_ANIMATION_DELAY = 500
DEFAULT_OUTPUT_PATH = "./out.pdf"
DEFAULT_FRAMEWORK = "auto"
DEFAULT_RENDERER = "pillow"


class ConfigManager:
    """Configuration management with environment variable substitution and validation."""

    def __init__(self, config_path: str = "config.json"):
        """
        Initialize the configuration manager.

        Args:
            config_path (str): Path to the YAML or JSON configuration file
        """
        self.config_path = config_path
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """
        Load and process the configuration file.

        Returns:
            dict: Processed configuration, empty when the file is missing or invalid
        """
        if not self.config_path or not os.path.exists(self.config_path):
            logger.info("No config file found, using default configuration")
            return {}

        try:
            with open(self.config_path, 'r') as file:
                # JSON allows tab indentation, which YAML rejects
                if self.config_path.lower().endswith(".json"):
                    config = json.load(file)
                else:
                    config = yaml.safe_load(file)

            if config is None:
                return {}

            # Process environment variables
            config = self._substitute_env_vars(config)

            # Validate the configuration
            self._validate_config(config)

            return config
        except (OSError, yaml.YAMLError, ValueError) as e:
            logger.error(f"Failed to load configuration: {e}")
            return {}

    def _substitute_env_vars(self, config: Any) -> Any:
        """
        Recursively substitute environment variables in the configuration.

        Args:
            config: Configuration object (dict, list, or scalar)

        Returns:
            Configuration with environment variables substituted
        """
        if isinstance(config, dict):
            return {k: self._substitute_env_vars(v) for k, v in config.items()}
        elif isinstance(config, list):
            return [self._substitute_env_vars(item) for item in config]
        elif isinstance(config, str):
            # Replace ${VAR} or $VAR with environment variable
            pattern = r'\${([^}]+)}|\$([a-zA-Z0-9_]+)'

            def replace_env_var(match):
                var_name = match.group(1) or match.group(2)
                return os.environ.get(var_name, match.group(0))

            return re.sub(pattern, replace_env_var, config)
        else:
            return config

    def _validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate the top-level configuration structure.

        Stopping rules and navigation tables are checked later, when a run
        builds them, so that a bad entry only disables that entry.

        Raises:
            ValueError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ValueError("Configuration must be a mapping")

        for key in ('url', 'outputPath', 'framework', 'renderer'):
            if key in config and config[key] is not None and not isinstance(config[key], str):
                raise ValueError(f"'{key}' must be a string")

    def get_config(self) -> Dict[str, Any]:
        """Get the processed configuration."""
        return self.config

    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)


@dataclass
class ConversionSettings:
    """Fully resolved settings for one conversion run."""

    url: Optional[str] = None
    output_path: str = DEFAULT_OUTPUT_PATH
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    picture_quality: int = DEFAULT_QUALITY
    animation_delay: int = DEFAULT_ANIMATION_DELAY
    overwrite: bool = False
    verbose: bool = False
    debug: bool = False
    framework: str = DEFAULT_FRAMEWORK
    renderer: str = DEFAULT_RENDERER
    max_slides: Optional[int] = None
    stopping_rule: Optional[Dict[str, Any]] = None
    navigation_table: Optional[List[Any]] = None


def is_int(value: Any) -> bool:
    """True for real integers; booleans do not count."""
    return isinstance(value, int) and not isinstance(value, bool)


def _first_valid(name: str, candidates, is_valid, default):
    """Return the first valid candidate (CLI value first, then file value)."""
    provided = [value for value in candidates if value is not None and value != ""]
    for value in provided:
        if is_valid(value):
            return value
    if provided:
        logger.warning(f"{name} value: Invalid, using default: {default}")
    else:
        logger.debug(f"{name} value: not found, using default: {default}")
    return default


def get_int_parameter(cli_value: Any, file_value: Any, name: str, default: int) -> int:
    """Pick a non-negative integer parameter: CLI, then config file, then default."""
    return _first_valid(name, (cli_value, file_value), lambda v: is_int(v) and v >= 0, default)


def get_picture_quality(cli_value: Any, file_value: Any) -> int:
    """Pick a picture quality in 0-100: CLI, then config file, then default."""
    return _first_valid(
        "Picture quality", (cli_value, file_value), lambda v: is_int(v) and 0 <= v <= 100, DEFAULT_QUALITY
    )


def _pick(cli_value: Any, file_value: Any, default: Any = None) -> Any:
    if cli_value is not None:
        return cli_value
    if file_value is not None:
        return file_value
    return default


def resolve_settings(args: Any, config: Dict[str, Any]) -> ConversionSettings:
    """
    Merge command line options over the configuration file.

    Args:
        args: argparse namespace (missing attributes count as not given)
        config (dict): Loaded configuration file

    Returns:
        ConversionSettings: Resolved settings; ``url`` may still be None
    """
    def cli(name):
        return getattr(args, name, None)

    output_path = _pick(cli('output_path'), config.get('outputPath'))
    if output_path is None:
        logger.info(f'No path/name specified for the rendered file. Default will be used: "{DEFAULT_OUTPUT_PATH}"')
        output_path = DEFAULT_OUTPUT_PATH

    max_slides = _pick(cli('max_slides'), config.get('maxSlides'))
    if max_slides is not None and not (is_int(max_slides) and max_slides > 0):
        logger.warning(f"Max slides value: Invalid ({max_slides!r}), no limit will be applied")
        max_slides = None

    return ConversionSettings(
        url=_pick(cli('url'), config.get('url')),
        output_path=output_path,
        width=get_int_parameter(cli('width'), config.get('width'), "Width", DEFAULT_WIDTH),
        height=get_int_parameter(cli('height'), config.get('height'), "Height", DEFAULT_HEIGHT),
        picture_quality=get_picture_quality(cli('picture_quality'), config.get('pictureQuality')),
        animation_delay=get_int_parameter(
            cli('delay'), config.get('animationDelay'), "Animation delay", DEFAULT_ANIMATION_DELAY
        ),
        overwrite=bool(cli('overwrite') or config.get('overwrite')),
        verbose=bool(cli('verbose') or config.get('verbose')),
        debug=bool(cli('debug') or config.get('debug')),
        framework=_pick(cli('framework'), config.get('framework'), DEFAULT_FRAMEWORK),
        renderer=_pick(cli('renderer'), config.get('renderer'), DEFAULT_RENDERER),
        max_slides=max_slides,
        stopping_rule=config.get('endCase'),
        navigation_table=config.get('navigate'),
    )

"""
User configuration for dockpages.

Settings live in ~/.config/dockpages/config.yaml and are grouped in four
sections, each backed by a dataclass:

    keybindings:  comma-separated key names per page action
    ui:           refresh interval and the page shown at start-up
    docker:       daemon URL, API timeout, list filters
    logging:      level, file location and rotation

Missing keys keep their defaults and unknown keys are logged and ignored.
A file that cannot be read or parsed leaves everything at its defaults.
"""

import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .events import parse_keys

logger = logging.getLogger(__name__)


@dataclass
class KeyBindings:
    """Customizable key bindings."""
    up: str = "up,k"
    down: str = "down,j"
    first: str = "g"
    last: str = "G,shift+g"
    delete: str = "d"
    image_delete: str = "ctrl+d"
    start: str = "r"
    stop: str = "s"
    attach: str = "a"
    run: str = "r"
    next_page: str = "tab"
    prev_page: str = "shift+tab"
    quit: str = "q"


@dataclass
class UIConfig:
    """UI-related configuration."""
    refresh_interval: float = 2.0  # seconds
    start_page: str = "containers"


@dataclass
class DockerConfig:
    """Docker-related configuration."""
    base_url: Optional[str] = None  # None: use DOCKER_HOST / local socket
    timeout: int = 60
    show_all_containers: bool = True
    hide_dangling_images: bool = True


@dataclass
class LogConfig:
    """Logging configuration."""
    level: str = "INFO"
    file_path: Optional[str] = None  # None for default
    max_size_mb: int = 10
    backup_count: int = 5


@dataclass
class AppConfig:
    """Main application configuration."""
    keybindings: KeyBindings = field(default_factory=KeyBindings)
    ui: UIConfig = field(default_factory=UIConfig)
    docker: DockerConfig = field(default_factory=DockerConfig)
    logging: LogConfig = field(default_factory=LogConfig)


class ConfigManager:
    """Configuration manager with YAML file support."""

    def __init__(self, config_dir: Optional[Path] = None):
        self.config_dir = Path(config_dir) if config_dir else Path.home() / ".config" / "dockpages"
        self.config_file = self.config_dir / "config.yaml"
        self._config: AppConfig = AppConfig()

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create config directory {self.config_dir}: {e}")

        self.load_config()

    def load_config(self) -> None:
        """(Re)read config.yaml, writing a default one on first run."""
        if not self.config_file.exists():
            self._config = AppConfig()
            self.save_config()
            logger.info(f"Wrote default settings to {self.config_file}")
            return

        try:
            raw = yaml.safe_load(self.config_file.read_text()) or {}
            self._config = self._merge_configs(AppConfig(), raw)
            logger.debug(f"Settings read from {self.config_file}")
        except (OSError, yaml.YAMLError, TypeError, AttributeError) as e:
            logger.error(f"Unusable config file {self.config_file} ({e}), falling back to defaults")
            self._config = AppConfig()

    def save_config(self) -> None:
        try:
            self.config_file.write_text(
                yaml.safe_dump(asdict(self._config), default_flow_style=False, indent=2)
            )
            logger.debug(f"Settings written to {self.config_file}")
        except OSError as e:
            logger.error(f"Could not write {self.config_file}: {e}")

    def get_config(self) -> AppConfig:
        return self._config

    def _merge_configs(self, base: AppConfig, raw: Dict[str, Any]) -> AppConfig:
        for section, values in raw.items():
            target = getattr(base, section, None)
            if target is None or not isinstance(values, dict):
                logger.warning(f"Ignoring config section: {section}")
                continue
            self._merge_dataclass(target, values)
        return base

    def _merge_dataclass(self, section: Any, values: Dict[str, Any]) -> None:
        for name, value in values.items():
            if name in section.__dataclass_fields__:
                setattr(section, name, value)
            else:
                logger.warning(f"Ignoring unknown config key: {name}")

    def get_keys(self, action: str) -> Tuple[str, ...]:
        """Get the key names bound to an action."""
        return parse_keys(str(getattr(self._config.keybindings, action, '')))

    def is_key_binding(self, key: str, action: str) -> bool:
        """Check if key matches one of the bindings for action."""
        return key in self.get_keys(action)

    def get_log_level(self) -> str:
        """Get configured log level."""
        return self._config.logging.level.upper()

    def get_custom_log_path(self) -> Optional[str]:
        """Get custom log file path if configured."""
        return self._config.logging.file_path

    def get_refresh_interval(self) -> float:
        """Get periodic refresh interval in seconds."""
        return float(self._config.ui.refresh_interval)


# Global config instance
config_manager = ConfigManager()

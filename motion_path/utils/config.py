"""
Runtime settings of the sampling engine.

Settings are grouped in dataclass sections held by one shared ConfigManager.
They come from the first config file found in the working directory, can be
patched from MOTION_PATH_* environment variables and changed while running;
listeners hear about every section that changes.
"""

import os
import json
import yaml
import logging
from typing import Dict, Any, Optional, List, Callable
from dataclasses import dataclass, field, asdict
import copy
import threading

# Searched in order; the first existing file wins
DEFAULT_CONFIG_PATHS = [
    "./motion_path.yaml",
    "./motion_path.yml",
    "./motion_path.json",
    "./config/motion_path.yaml",
    "./config/motion_path.json",
]

_YAML_EXTENSIONS = ('.yaml', '.yml')


@dataclass
class SamplingConfig:
    """Curve discretization and resampling parameters."""
    step_count: int = 100        # parameter subdivisions per segment
    density: float = 2.0         # spacing used when a caller passes no density
    tolerance: float = 1e-6      # absolute slack on arc-length comparisons


@dataclass
class LoggingConfig:
    level: str = "INFO"
    format: str = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"

    console_output: bool = True
    file_output: bool = False
    file_path: str = "logs/motion_path.log"
    max_file_size: int = 10 * 1024 * 1024
    backup_count: int = 5

    # Per-component overrides of level
    component_levels: Dict[str, str] = field(default_factory=lambda: {
        "sampling": "INFO",
        "resampling": "INFO",
        "path": "INFO",
        "performance": "INFO",
    })


@dataclass
class SystemConfig:
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    system_name: str = "MotionPathSampler"
    version: str = "1.0.0"
    debug_mode: bool = False


def _parse_env_value(raw: str, current: Any) -> Any:
    """Convert an environment string to the type of the value it replaces."""
    if isinstance(current, bool):
        return raw.lower() in ('true', 'yes', '1', 'y')
    if isinstance(current, (int, float)):
        return type(current)(raw)
    return raw


class ConfigManager:
    """
    Process-wide holder of the SystemConfig.

    Constructing it again returns the same instance.
    """

    _instance = None
    _lock = threading.RLock()

    def __new__(cls, *args, **kwargs):
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._initialized = False
            return cls._instance

    def __init__(self, config_path: Optional[str] = None):
        with self._lock:
            if self._initialized:
                return

            self._logger = logging.getLogger("motion_path.config")
            self._config = SystemConfig()
            self._config_path = None
            self._listeners: List[Callable[[str], None]] = []
            self._initialized = True

            if config_path:
                self.load_config(config_path)
            else:
                self._load_first_found()

    def _load_first_found(self) -> bool:
        for path in DEFAULT_CONFIG_PATHS:
            if not os.path.exists(path):
                continue
            try:
                self.load_config(path)
            except (OSError, ValueError, yaml.YAMLError) as e:
                self._logger.warning(f"Ignoring config file {path}: {e}")
                continue
            self._logger.info(f"Configuration loaded from {path}")
            return True

        self._logger.debug("No configuration file found, using defaults")
        return False

    def load_config(self, path: str) -> None:
        """
        Merge a YAML or JSON file into the current configuration.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: On an unknown extension or a non-mapping document
        """
        if not os.path.exists(path):
            raise FileNotFoundError(f"Configuration file not found: {path}")

        extension = os.path.splitext(path)[1].lower()
        try:
            with open(path, 'r') as f:
                if extension in _YAML_EXTENSIONS:
                    data = yaml.safe_load(f) or {}
                elif extension == '.json':
                    data = json.load(f)
                else:
                    raise ValueError(f"Unsupported configuration file type: {extension}")

            if not isinstance(data, dict):
                raise ValueError(f"Configuration root must be a mapping: {path}")
        except Exception as e:
            self._logger.error(f"Error loading configuration from {path}: {e}")
            raise

        self.update_from_dict(data)
        self._config_path = path

    def save_config(self, path: Optional[str] = None) -> None:
        """
        Write the configuration to path, or back to the file it came from.

        Raises:
            ValueError: If there is no target path or its extension is unknown
        """
        target = path or self._config_path
        if target is None:
            raise ValueError("No configuration path specified")

        extension = os.path.splitext(target)[1].lower()
        if extension not in _YAML_EXTENSIONS and extension != '.json':
            raise ValueError(f"Unsupported configuration file type: {extension}")

        os.makedirs(os.path.dirname(os.path.abspath(target)), exist_ok=True)
        with open(target, 'w') as f:
            if extension == '.json':
                json.dump(self.as_dict(), f, indent=2)
            else:
                yaml.safe_dump(self.as_dict(), f, default_flow_style=False)

        self._logger.info(f"Configuration saved to {target}")

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self._config)

    def update_from_dict(self, values: Dict[str, Any]) -> None:
        """Apply nested {section: {key: value}} values; unknown names are skipped."""
        with self._lock:
            changed = []
            for name, section_values in values.items():
                if not hasattr(self._config, name):
                    continue
                if isinstance(section_values, dict):
                    section = getattr(self._config, name)
                    known = {k: v for k, v in section_values.items() if hasattr(section, k)}
                    for key, value in known.items():
                        setattr(section, key, value)
                    if known:
                        changed.append(name)
                else:
                    setattr(self._config, name, section_values)
                    changed.append('system')

            for section_name in dict.fromkeys(changed):
                self._notify_listeners(section_name)

    def reset(self) -> None:
        """Back to defaults, forgetting the loaded file."""
        with self._lock:
            self._config = SystemConfig()
            self._config_path = None
            for section_name in ('sampling', 'logging', 'system'):
                self._notify_listeners(section_name)

    def add_listener(self, listener: Callable[[str], None]) -> None:
        """Register a callback taking the name of each changed section."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: Callable[[str], None]) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _notify_listeners(self, section_name: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(section_name)
            except Exception as e:
                self._logger.warning(f"Configuration listener failed on {section_name}: {e}")

    def get_config(self) -> SystemConfig:
        return copy.deepcopy(self._config)

    def get_sampling_config(self) -> SamplingConfig:
        return copy.deepcopy(self._config.sampling)

    def get_logging_config(self) -> LoggingConfig:
        return copy.deepcopy(self._config.logging)

    def get(self, section: str, key: str, default: Any = None) -> Any:
        return getattr(getattr(self._config, section, None), key, default)

    def set(self, section: str, key: str, value: Any) -> bool:
        """
        Change one value and notify listeners.

        Returns:
            bool: False when the section or key does not exist
        """
        with self._lock:
            section_obj = getattr(self._config, section, None)
            if section_obj is None or not hasattr(section_obj, key):
                return False
            setattr(section_obj, key, value)
            self._notify_listeners(section)
            return True

    def override_from_env(self, prefix: str = "MOTION_PATH_") -> List[str]:
        """
        Apply PREFIX<SECTION>_<KEY> environment variables.

        MOTION_PATH_SAMPLING_STEP_COUNT=200 sets sampling.step_count. Values
        are converted to the type of the setting they replace; variables
        naming unknown settings or failing conversion are skipped.

        Returns:
            List[str]: "section.key" of every applied override
        """
        applied = []
        for name, raw in os.environ.items():
            if not name.startswith(prefix):
                continue
            parts = name[len(prefix):].lower().split('_', 1)
            if len(parts) != 2:
                continue

            section, key = parts
            current = self.get(section, key)
            if current is None:
                continue
            try:
                value = _parse_env_value(raw, current)
            except ValueError as e:
                self._logger.warning(f"Cannot override {section}.{key} from {name}: {e}")
                continue

            self.set(section, key, value)
            applied.append(f"{section}.{key}")
            self._logger.info(f"{section}.{key} = {value!r} (from {name})")

        return applied


config_manager = ConfigManager()

"""
Everpak Configuration
Single source of truth for all settings.
Load once at startup, pass to all components.
"""
import copy
import json
from pathlib import Path
from .utils.logger import logger


# Default config values
DEFAULTS = {
    "compression": {
        "level": 1,          # zlib level, matches the game's own packer
        "workers": 1,        # > 1 enables thread pool (de)compression
        "batch_size": 64     # chunks per parallel batch
    },
    "progress": {
        "enabled": True
    },
    "naming": {
        "packed_marker": ".p",
        "unpacked_marker": "_decompressed.p"
    }
}


class PakConfig:
    def __init__(self, config_path: str = None):
        self._config = self._deep_copy(DEFAULTS)

        if config_path:
            self.config_path = Path(config_path)
        else:
            # Look for config in project root
            self.config_path = Path(__file__).parent.parent / 'everpak.config.json'

        if self.config_path.exists():
            self._load()
        else:
            logger.debug(f"No config file found at {self.config_path} — using defaults")

    def _load(self):
        """Load and merge config file over defaults"""
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                user_config = json.load(f)
            self._deep_merge(self._config, user_config)
            logger.debug(f"Loaded config from {self.config_path}")
        except json.JSONDecodeError as e:
            logger.error(f"Invalid JSON in config file: {e} — using defaults")
        except OSError as e:
            logger.error(f"Failed to load config: {e} — using defaults")

    def save(self, path: str = None):
        """Save current config to file"""
        out_path = Path(path) if path else self.config_path
        with open(out_path, 'w', encoding='utf-8') as f:
            json.dump(self._config, f, indent=2)
        logger.info(f"Config saved to {out_path}")

    def get(self, *keys, default=None):
        """
        Get a nested config value by key path.
        e.g. config.get('compression', 'level')
        """
        value = self._config
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def set(self, *keys_and_value):
        """
        Set a nested config value.
        e.g. config.set('compression', 'workers', 4)
        """
        *keys, value = keys_and_value
        target = self._config
        for key in keys[:-1]:
            target = target.setdefault(key, {})
        target[keys[-1]] = value

    # ── Convenience properties ─────────────────────────────────────────────

    @property
    def compression_level(self) -> int:
        return self.get('compression', 'level', default=1)

    @property
    def workers(self) -> int:
        return self.get('compression', 'workers', default=1) or 1

    @property
    def batch_size(self) -> int:
        return self.get('compression', 'batch_size', default=64)

    @property
    def progress_enabled(self) -> bool:
        return self.get('progress', 'enabled', default=True)

    @property
    def packed_marker(self) -> str:
        return self.get('naming', 'packed_marker', default='.p')

    @property
    def unpacked_marker(self) -> str:
        return self.get('naming', 'unpacked_marker', default='_decompressed.p')

    # ── Helpers ────────────────────────────────────────────────────────────

    @staticmethod
    def _deep_copy(d: dict) -> dict:
        return copy.deepcopy(d)

    @staticmethod
    def _deep_merge(base: dict, override: dict):
        """Merge override into base recursively — modifies base in place"""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                PakConfig._deep_merge(base[key], value)
            else:
                base[key] = value


# Singleton — import this everywhere
config = PakConfig()

__all__ = ["PakConfig", "config", "DEFAULTS"]

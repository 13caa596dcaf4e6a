"""Configuration management for the probe CLI."""

import json
import os
import shutil
from pathlib import Path
from typing import List


def _targets_from_env() -> List[str]:
    raw = os.environ.get("PROBE_TARGETS", "http://localhost:8787")
    return [target.strip().rstrip('/') for target in raw.split(',') if target.strip()]


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "targets": _targets_from_env(),
        "timeout": 30,
        "duration": 10,
        "slab_mib": 8,
        "batch": 16,
        "upload_mib": 16,
    }

    def __init__(self, config_path: Path):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.probe/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.probe' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                config = self._defaults()
                config.update(data)
                return config
            except (json.JSONDecodeError, IOError):
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except IOError:
                    pass
                return self._defaults()
        else:
            config = self._defaults()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError:
                pass
            return config

    def _defaults(self) -> dict:
        config = self.DEFAULT_CONFIG.copy()
        config["targets"] = list(self.DEFAULT_CONFIG["targets"])
        return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError:
            pass

    def get_targets(self) -> List[str]:
        """
        Get the ordered list of base URLs, primary first.

        Returns:
            List of base URL strings (e.g., ["http://localhost:8787"])
        """
        targets = self.data.get('targets') or []
        if isinstance(targets, str):
            targets = [targets]
        return [target.rstrip('/') for target in targets]

    def set_targets(self, targets: List[str], persist: bool = True) -> None:
        """
        Replace the target list.

        Args:
            targets: Base URLs in the order they should be tried
            persist: Save to file; False keeps the change for this run only
        """
        self.data['targets'] = [target.rstrip('/') for target in targets]
        if persist:
            self.save()

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', 30)

    def get_measurement_defaults(self) -> dict:
        """
        Get default measurement parameters.

        Returns:
            Dictionary with 'duration', 'slab_mib', 'batch' and 'upload_mib'
        """
        return {
            'duration': self.data.get('duration', 10),
            'slab_mib': self.data.get('slab_mib', 8),
            'batch': self.data.get('batch', 16),
            'upload_mib': self.data.get('upload_mib', 16),
        }

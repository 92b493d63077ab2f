"""
config.py - System Configuration Settings
==========================================
Central configuration for the subwindow search system.
"""

from typing import Dict, Any


class Config:
    """System-wide configuration settings."""

    # ============================================================================
    # INPUT CONFIGURATION
    # ============================================================================

    # Supported weight map formats
    ARRAY_FORMATS = ['.npy', '.npz']
    IMAGE_FORMATS = ['.png', '.tif', '.tiff', '.exr', '.pfm', '.bmp']

    # ============================================================================
    # COORDINATE CONFIGURATION
    # ============================================================================

    # Rectangle coordinates are kept in the signed 16-bit range
    COORDINATES = {
        'max_value': 32767,
    }

    # ============================================================================
    # SEARCH CONFIGURATION
    # ============================================================================

    SEARCH = {
        'qbits': 0,
        'verbose': 0,
        'progress_interval': 10000,  # iterations between progress reports
        'max_iterations': None,  # None = run until optimal
        'strict_bounds': False,  # raise on non-monotone child bounds
        'bound_tolerance': 1e-6,
    }

    # ============================================================================
    # VISUALIZATION CONFIGURATION
    # ============================================================================

    VISUALIZATION = {
        'colormap': 'jet',
        'box_color': (255, 255, 255),  # BGR
        'line_thickness': 2,
        'min_size': 400,  # upscale small grids to at least this many pixels
    }

    # ============================================================================
    # LOGGING CONFIGURATION
    # ============================================================================

    LOGGING = {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'date_format': '%Y-%m-%d %H:%M:%S',
        'file': None,
        'max_bytes': 10 * 1024 * 1024,  # 10 MB
        'backup_count': 5,
        'console_output': True
    }

    @classmethod
    def get(cls, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-notation key."""
        keys = key.split('.')
        value = cls

        for k in keys:
            if isinstance(value, dict):
                if k not in value:
                    return default
                value = value[k]
            elif hasattr(value, k):
                value = getattr(value, k)
            else:
                return default

        return value

    @classmethod
    def set(cls, key: str, value: Any):
        """Set configuration value by dot-notation key."""
        keys = key.split('.')
        target = cls

        for k in keys[:-1]:
            if isinstance(target, dict) and k in target:
                target = target[k]
            elif hasattr(target, k):
                target = getattr(target, k)
            else:
                raise KeyError(f"Configuration key not found: {key}")

        final_key = keys[-1]
        if isinstance(target, dict):
            target[final_key] = value
        elif hasattr(target, final_key):
            setattr(target, final_key, value)
        else:
            raise KeyError(f"Cannot set configuration key: {key}")

    @classmethod
    def to_dict(cls) -> Dict[str, Any]:
        """Convert configuration to dictionary."""
        result = {}

        for attr in dir(cls):
            if not attr.startswith('_') and attr.isupper():
                value = getattr(cls, attr)
                if not callable(value):
                    result[attr] = value

        return result

    @classmethod
    def from_file(cls, filepath: str):
        """
        Load configuration from JSON or YAML file.
        Dict sections are merged key by key, other values replaced.
        """
        import json

        filepath = str(filepath)
        with open(filepath, 'r') as f:
            if filepath.endswith('.json'):
                config_data = json.load(f)
            elif filepath.endswith(('.yml', '.yaml')):
                import yaml
                config_data = yaml.safe_load(f) or {}
            else:
                raise ValueError(f"Unsupported config file format: {filepath}")

        for key, value in config_data.items():
            if not hasattr(cls, key):
                continue
            current = getattr(cls, key)
            if isinstance(current, dict) and isinstance(value, dict):
                current.update(value)
            else:
                setattr(cls, key, value)

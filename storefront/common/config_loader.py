"""
Configuration Loader

Loads YAML configuration files for the catalog vocabulary
(category mapping, known categories, care instructions)
and runtime settings (collection name, batch size, page sizes).
"""

from pathlib import Path
from typing import Any, Dict, Optional, Set

import yaml


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'catalog.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_category_map() -> Dict[str, str]:
    """
    Load the source -> storefront category mapping.

    Returns:
        Dictionary mapping imported category names to category slugs

    Example:
        {
            'linen': 'casual',
            'chiffon': 'party',
            'Silk Sarees': 'silk',
            ...
        }
    """
    config = load_config('catalog.yaml')
    return config.get('category_map', {})


def load_categories() -> Dict[str, str]:
    """
    Load storefront categories.

    Returns:
        Dictionary mapping category slug to display name
    """
    config = load_config('catalog.yaml')
    return config.get('categories', {})


def load_care_instructions() -> Dict[str, str]:
    """
    Load default care instructions per category.

    Returns:
        Dictionary mapping category slug to care text
    """
    config = load_config('catalog.yaml')
    return config.get('care_by_category', {})


def get_known_categories(categories: Optional[Dict[str, str]] = None) -> Set[str]:
    """
    Get set of storefront category slugs.

    Args:
        categories: Category dict (if None, loads from config)

    Returns:
        Set of category slugs
    """
    if categories is None:
        categories = load_categories()

    return set(categories.keys())


def load_settings() -> Dict[str, Any]:
    """
    Load runtime settings.

    Returns:
        Dictionary with 'store' and 'query' sections
    """
    return load_config('settings.yaml')

"""
Settings for the knockout app: defaults overlaid with settings.yaml.
"""
import logging
import os

import yaml

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = 'settings.yaml'


def get_default_settings():
    """Return default settings."""
    return {
        'min_participants': 2,
        'max_participants': 48,
        'match_size': 2,
    }


def load_settings(data_dir):
    """Load settings.yaml from data_dir, falling back to defaults for missing keys."""
    settings = get_default_settings()
    path = os.path.join(data_dir, SETTINGS_FILENAME)
    if not os.path.exists(path):
        return settings
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning(f'Failed to parse {path}: {e}')
        return settings
    if isinstance(data, dict):
        settings.update({k: v for k, v in data.items() if k in settings})
    return settings


def save_settings(data_dir, settings):
    """Save settings to settings.yaml in data_dir."""
    os.makedirs(data_dir, exist_ok=True)
    with open(os.path.join(data_dir, SETTINGS_FILENAME), 'w', encoding='utf-8') as f:
        yaml.dump(settings, f, default_flow_style=False)

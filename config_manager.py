"""
Configuration Management for POMO Editor

Handles loading and saving of user configuration.
"""

import json
import logging
import os

from constants import CONFIG_FILENAME, DEFAULT_LOG_LEVEL

logger = logging.getLogger(__name__)

MAX_RECENT_FILES = 10


class ConfigManager:
    """Manages application configuration"""

    def __init__(self, config_file=None):
        self.config_file = config_file or os.path.join(os.path.expanduser("~"), CONFIG_FILENAME)
        self.reset()

    def reset(self):
        """Restore the default settings"""
        self.recent_files = []  # Most recent first
        self.advanced_editing = False  # Allows adding entries and editing the header
        self.wrap_width = None  # None keeps each file's own wrapping
        self.create_backups = True
        self.log_level = DEFAULT_LOG_LEVEL

    def load(self):
        """Load saved configuration"""
        if not os.path.exists(self.config_file):
            return
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = json.load(f)
            self.recent_files = [
                path for path in config.get('recent_files', [])
                if os.path.exists(path)
            ]
            self.advanced_editing = bool(config.get('advanced_editing', False))
            wrap_width = config.get('wrap_width')
            self.wrap_width = wrap_width if isinstance(wrap_width, int) and wrap_width > 0 else None
            self.create_backups = bool(config.get('create_backups', True))
            self.log_level = str(config.get('log_level', DEFAULT_LOG_LEVEL)).upper()
        except (OSError, ValueError, AttributeError) as e:
            # A corrupted config file falls back to defaults
            logger.warning("Ignoring unreadable config %s: %s", self.config_file, e)
            self.reset()

    def save(self):
        """Save configuration"""
        config = {
            'recent_files': self.recent_files,
            'advanced_editing': self.advanced_editing,
            'wrap_width': self.wrap_width,
            'create_backups': self.create_backups,
            'log_level': self.log_level,
        }
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.warning("Could not save config %s: %s", self.config_file, e)

    def add_recent_file(self, file_path):
        """Move a file to the top of the recent list"""
        file_path = os.path.abspath(file_path)
        if file_path in self.recent_files:
            self.recent_files.remove(file_path)
        self.recent_files.insert(0, file_path)
        del self.recent_files[MAX_RECENT_FILES:]

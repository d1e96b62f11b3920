import json
import logging
import math
import os

logger = logging.getLogger(__name__)


class Settings:
    """Defaults for the candidate tool, persisted as JSON"""

    DEFAULT_SETTINGS = {
        'max_distance': None,
        'dedupe': True,
        'check_files': False,
        'indent': 2,
    }

    # accepted JSON types per key; bool is rejected where a number is expected
    SETTING_TYPES = {
        'max_distance': (int, float, type(None)),
        'dedupe': (bool,),
        'check_files': (bool,),
        'indent': (int, type(None)),
    }

    def __init__(self, settings_file=None):
        if settings_file is None:
            home = os.path.expanduser("~")
            self.settings_file = os.path.join(home, '.dupsnap_candidates_settings.json')
        else:
            self.settings_file = settings_file

        self.settings = self.DEFAULT_SETTINGS.copy()
        self.load()

    def load(self):
        """Merge the settings file over the defaults, if it exists"""
        if os.path.exists(self.settings_file):
            try:
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    loaded = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning("Failed to load settings from %s: %s", self.settings_file, e)
                return
            if not isinstance(loaded, dict):
                logger.warning("Ignoring settings file %s: expected a JSON object", self.settings_file)
                return
            unknown = sorted(set(loaded) - set(self.DEFAULT_SETTINGS))
            if unknown:
                logger.warning("Unknown settings ignored: %s", ", ".join(unknown))
            for key, value in loaded.items():
                if key not in self.DEFAULT_SETTINGS:
                    continue
                if not self.is_valid(key, value):
                    logger.warning("Ignoring setting %s: unexpected value %r", key, value)
                    continue
                self.settings[key] = value

    @classmethod
    def is_valid(cls, key, value):
        expected = cls.SETTING_TYPES[key]
        if isinstance(value, bool) and bool not in expected:
            return False
        if not isinstance(value, expected):
            return False
        if isinstance(value, float) and not math.isfinite(value):
            return False
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value < 0:
            return False
        return True

    def save(self):
        try:
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            logger.warning("Failed to save settings to %s: %s", self.settings_file, e)

    def get(self, key, default=None):
        return self.settings.get(key, default)

    def set(self, key, value):
        """Set a setting value and persist it"""
        self.settings[key] = value
        self.save()

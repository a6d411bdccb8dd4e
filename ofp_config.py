#!/usr/bin/env python3
"""
Configuration handling for the OFP flight logger

This module provides configuration management for the OFP flight logger.
It handles the config file and command line overrides for the output
folder, aircraft title, flight plan and polling cadence.
"""

import configparser
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from ofp_utils import numberOrString
from ofp_constants import (
    DEFAULT_OUT_PATH,
    DEFAULT_AIRCRAFT_TITLE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_TAKEOFF_ROLL_POLL_INTERVAL,
    CONFIG_SECTION_DEFAULTS,
    CONFIG_FILE_NAMES,
)

# Configure logger
logger = logging.getLogger(__name__)


@dataclass
class MonitorSettings:
    """Polling cadence of the monitoring loop"""
    poll_interval: float = DEFAULT_POLL_INTERVAL
    takeoff_roll_poll_interval: float = DEFAULT_TAKEOFF_ROLL_POLL_INTERVAL
    realtime: bool = False

    def __post_init__(self):
        if self.poll_interval <= 0 or self.takeoff_roll_poll_interval <= 0:
            raise ValueError("Poll intervals must be positive")


class ConfigParser:
    """
    Handles parsing of configuration files.
    Separates the parsing logic from the configuration storage.
    """

    BOOLEAN_KEYS = ('realtime',)
    NUMERIC_KEYS = ('pollinterval', 'takeoffrollpollinterval')

    def __init__(self):
        """Initialize the config parser"""
        self.parser = configparser.RawConfigParser()

    def find_config_file(self, cli_path: Optional[str] = None) -> Optional[str]:
        """Find a configuration file to use"""
        if cli_path:
            if os.path.isfile(cli_path):
                logger.info(f"Using configuration file: {cli_path}")
                return cli_path
            logger.warning(f"Configuration file not found: {cli_path}")

        # Look in standard locations
        paths = ('.', os.path.dirname(os.path.abspath(__file__)))

        for path in paths:
            for file in CONFIG_FILE_NAMES:
                full_path = os.path.join(path, file)
                if Path(full_path).is_file():
                    logger.info(f"Found configuration file: {full_path}")
                    return full_path

        logger.debug("No configuration file found, using defaults")
        return None

    def load_config_file(self, file_path: Optional[str] = None) -> bool:
        """Load configuration from file"""
        config_file = self.find_config_file(file_path)
        if not config_file:
            return False

        try:
            self.parser.read(config_file, encoding='utf-8')
            return True
        except configparser.Error as e:
            logger.error(f"Error reading config file: {e}")
            return False

    def get_default_settings(self) -> Dict[str, Any]:
        """Get default settings from configuration"""
        defaults: Dict[str, Any] = {}

        if CONFIG_SECTION_DEFAULTS in self.parser:
            section = self.parser[CONFIG_SECTION_DEFAULTS]

            # Copy all values from defaults section
            for key, value in section.items():
                defaults[key] = value

            # Convert numeric values
            for key in self.NUMERIC_KEYS:
                if key in defaults:
                    value = numberOrString(defaults[key])
                    if isinstance(value, str):
                        raise ValueError(f"Invalid {key} in configuration: {value!r}")
                    defaults[key] = value

            for key in self.BOOLEAN_KEYS:
                if key in defaults:
                    defaults[key] = section.getboolean(key)

        return defaults


class Config:
    """Main configuration class for the OFP flight logger"""

    def __init__(self, cli_args):
        """Initialize with command line arguments"""
        self.parser = ConfigParser()
        self.cli_args = cli_args

        # Initialize defaults
        self.aircraft = DEFAULT_AIRCRAFT_TITLE
        self.out_path = DEFAULT_OUT_PATH
        self.flight_plan_path: Optional[str] = None
        self.monitor_settings = MonitorSettings()

        # Load configuration
        self._load_config()

    def _cli(self, name: str):
        return getattr(self.cli_args, name, None)

    def _load_config(self):
        """Load and process configuration"""
        # Load config file
        self.parser.load_config_file(self._cli('config'))

        # Get default settings
        defaults = self.parser.get_default_settings()

        # Apply CLI arguments (override config file)
        if self._cli('aircraft'):
            self.aircraft = self._cli('aircraft')
        elif 'aircraft' in defaults:
            self.aircraft = defaults['aircraft']

        if self._cli('output'):
            self.out_path = self._cli('output')
        elif 'outpath' in defaults:
            self.out_path = defaults['outpath']

        if self._cli('flightplan'):
            self.flight_plan_path = self._cli('flightplan')
        elif defaults.get('flightplan'):
            self.flight_plan_path = defaults['flightplan']

        realtime = self._cli('realtime')
        self.monitor_settings = MonitorSettings(
            poll_interval=defaults.get('pollinterval', DEFAULT_POLL_INTERVAL),
            takeoff_roll_poll_interval=defaults.get('takeoffrollpollinterval',
                                                    DEFAULT_TAKEOFF_ROLL_POLL_INTERVAL),
            realtime=realtime if realtime is not None else defaults.get('realtime', False),
        )

    @property
    def outPath(self) -> str:
        """Get output path"""
        return self.out_path

    @property
    def poll_interval(self) -> float:
        return self.monitor_settings.poll_interval

    @property
    def takeoff_roll_poll_interval(self) -> float:
        return self.monitor_settings.takeoff_roll_poll_interval

    @property
    def realtime(self) -> bool:
        return self.monitor_settings.realtime

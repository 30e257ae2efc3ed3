"""Editor configuration: colors, history size, default file, recent files"""

import os
import json
import logging
from dataclasses import dataclass, field, asdict, fields
from typing import List

from glitter.constants import (
	ANSI_ACTIVE, ANSI_OVERLAY,
	DEFAULT_FILENAME, DEFAULT_MAX_HISTORY, DEFAULT_MAX_RECENT_FILES,
	EDGE_THRESHOLD_PX, MIN_DRAG_W_PX, MIN_DRAG_H_PX,
)
from glitter.utils.logger import logger_raise

logger = logging.getLogger(__name__)

CONFIG_DIR = os.path.join(os.path.expanduser("~"), ".glitter")
CONFIG_FILE = os.path.join(CONFIG_DIR, "config.json")


@dataclass
class EditorConfig:
	"""Settings persisted between editor sessions"""
	active_color: str = ANSI_ACTIVE
	overlay_color: str = ANSI_OVERLAY
	max_history: int = DEFAULT_MAX_HISTORY
	default_filename: str = DEFAULT_FILENAME
	edge_threshold_px: int = EDGE_THRESHOLD_PX
	min_drag_w_px: int = MIN_DRAG_W_PX
	min_drag_h_px: int = MIN_DRAG_H_PX
	max_recent_files: int = DEFAULT_MAX_RECENT_FILES
	recent_files: List[str] = field(default_factory=list)
	
	def add_recent_file(self, filepath):
		"""Move a file to the front of the recent files list"""
		if filepath in self.recent_files:
			self.recent_files.remove(filepath)
		self.recent_files.insert(0, filepath)
		self.recent_files = self.recent_files[:self.max_recent_files]


def load_config(config_file=CONFIG_FILE):
	"""Load settings from a JSON config file
	
	A missing file yields defaults. Unknown keys are ignored.
	
	Args:
		config_file: Path to config.json
	
	Returns:
		EditorConfig
	"""
	config = EditorConfig()
	if not os.path.exists(config_file):
		return config
	
	try:
		with open(config_file, 'r', encoding='utf-8') as f:
			data = json.load(f)
	except (OSError, ValueError) as e:
		logger_raise(e, f"Error loading config: {config_file}")
	
	if not isinstance(data, dict):
		logger_raise(ValueError(f"Config must be a JSON object: {config_file}"))
	
	known = {f.name for f in fields(EditorConfig)}
	for key, value in data.items():
		if key in known:
			setattr(config, key, value)
		else:
			logger.warning(f"Ignoring unknown config key: {key}")
	
	config.recent_files = list(config.recent_files)[:config.max_recent_files]
	logger.debug(f"Loaded config from {config_file}")
	return config


def save_config(config, config_file=CONFIG_FILE):
	"""Write settings to a JSON config file, creating its directory"""
	try:
		config_dir = os.path.dirname(config_file)
		if config_dir:
			os.makedirs(config_dir, exist_ok=True)
		
		data = asdict(config)
		data['recent_files'] = config.recent_files[:config.max_recent_files]
		
		with open(config_file, 'w', encoding='utf-8') as f:
			json.dump(data, f, indent=2)
	except OSError as e:
		logger_raise(e, "Error saving config")

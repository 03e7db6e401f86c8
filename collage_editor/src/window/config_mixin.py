"""Configuration management for CollageEditor"""

import os
import json
from utils.logger import loggerReport

from constants import DEFAULT_API_BASE_URL


class ConfigMixin:
	"""Configuration file: backend URL and the remembered user"""
	
	def _load_config(self):
		"""Load settings from config file
		
		An unreadable or malformed file is reported and ignored; the editor
		starts with defaults.
		
		Returns:
			dict: Parsed config (empty if missing or unusable)
		"""
		config = {}
		try:
			if os.path.exists(self.config_file):
				with open(self.config_file, 'r', encoding='utf-8') as f:
					config = json.load(f)
		except (OSError, ValueError) as e:
			loggerReport(e, "Settings could not be read; using defaults.")
			config = {}
		if not isinstance(config, dict):
			config = {}
		
		self.api_base_url = config.get('api_base_url') or DEFAULT_API_BASE_URL
		# Remembered sign-in; only trusted when it carries an id
		user = config.get('user')
		self.saved_user = user if isinstance(user, dict) and user.get('id') else None
		return config
	
	def _save_config(self):
		"""Save settings to config file
		
		Returns:
			bool: False if the file could not be written
		"""
		try:
			# Create config directory if it doesn't exist
			os.makedirs(self.config_dir, exist_ok=True)
			
			config = {
				'api_base_url': self.api_base_url,
				'user': self.controller.user if self.controller.is_logged_in else None,
			}
			
			with open(self.config_file, 'w', encoding='utf-8') as f:
				json.dump(config, f, indent=2)
		except OSError as e:
			loggerReport(e, "Settings could not be saved.")
			return False
		return True

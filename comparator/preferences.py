"""
Per-device preferences store.
A single JSON file maps preference keys to JSON values.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from loguru import logger


class JsonPreferencesStore:
	"""
	Key/value preferences persisted to one JSON file.
	Reads and writes may raise OSError or ValueError; callers decide how to degrade.
	"""

	def __init__(self, filepath):
		self.filepath = Path(filepath)

	def _read_all(self) -> Dict[str, Any]:
		if not self.filepath.exists():
			return {}
		with open(self.filepath, 'r', encoding='utf-8') as f:
			data = json.load(f)  # JSONDecodeError is a ValueError
		if not isinstance(data, dict):
			raise ValueError(f"Preferences file {self.filepath} does not hold a JSON object")
		return data

	def read_local(self, key: str) -> Optional[Any]:
		"""Return the stored value for key, or None when nothing is stored."""
		return self._read_all().get(key)

	def write_local(self, key: str, value: Any) -> None:
		data = self._read_all()
		data[key] = value
		self.filepath.parent.mkdir(parents=True, exist_ok=True)
		tmp_path = self.filepath.with_suffix(self.filepath.suffix + '.tmp')
		with open(tmp_path, 'w', encoding='utf-8') as f:
			json.dump(data, f, indent=2)
		tmp_path.replace(self.filepath)  # atomic swap
		logger.debug(f"[Preferences] Wrote '{key}' to {self.filepath}")

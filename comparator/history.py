"""
Comparison history store.
Keeps one JSON document per user with a 'history' array of comparison entries.
"""

import asyncio
import json
import re
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger

_SAFE_ID = re.compile(r'[^A-Za-z0-9_.-]')


class JsonHistoryStore:
	"""
	File-backed user documents under a directory (one ``<user_id>.json`` each).
	Appending an entry equal to an existing one is a no-op, like an array union.
	"""

	def __init__(self, directory):
		self.directory = Path(directory)
		self._lock = threading.Lock()  # appends run in worker threads

	def _path(self, user_id: str) -> Path:
		if not user_id:
			raise ValueError("user_id is required")
		return self.directory / f"{_SAFE_ID.sub('_', user_id)}.json"

	def _load(self, path: Path) -> Dict[str, Any]:
		if not path.exists():
			return {}
		with open(path, 'r', encoding='utf-8') as f:
			return json.load(f)

	def read_history(self, user_id: str) -> List[Dict[str, Any]]:
		return list(self._load(self._path(user_id)).get('history', []))

	def append(self, user_id: str, entry: Dict[str, Any]) -> None:
		"""Blocking append used by the async entry point."""
		path = self._path(user_id)
		with self._lock:  # read-modify-write must not interleave
			doc = self._load(path)
			history = doc.setdefault('history', [])
			if entry not in history:
				history.append(entry)
			doc['updated_at'] = datetime.now(timezone.utc).isoformat()
			path.parent.mkdir(parents=True, exist_ok=True)
			tmp_path = path.with_suffix(path.suffix + '.tmp')
			with open(tmp_path, 'w', encoding='utf-8') as f:
				json.dump(doc, f, indent=2)
			tmp_path.replace(path)  # readers never see a partial file
		logger.debug(f"[History] {user_id}: {len(history)} entries")

	async def append_history(self, user_id: str, entry: Dict[str, Any]) -> None:
		await asyncio.to_thread(self.append, user_id, entry)

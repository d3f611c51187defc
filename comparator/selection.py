"""
Comparison selection store.
Persists the items a user picked for comparison, per category, under a size limit.
"""

from typing import Any, Dict, List, Tuple

from loguru import logger

from .categories import CategoryDescriptor

DEFAULT_LIMIT = 15
MIN_LIMIT = 2
MAX_LIMIT = 30


def clamp(n: int, low: int, high: int) -> int:
	return max(low, min(high, n))


class SelectionStore:
	"""
	Minimal item records ({'id', 'title'|'name', ...}) kept in the preferences store.
	Read failures degrade to an empty list or the default limit; write failures are logged.
	"""

	def __init__(self, descriptor: CategoryDescriptor, preferences):
		self.descriptor = descriptor
		self.preferences = preferences

	def limit(self) -> int:
		try:
			raw = self.preferences.read_local(self.descriptor.limit_pref_key)
			if raw is None:
				return DEFAULT_LIMIT
			return clamp(int(raw), MIN_LIMIT, MAX_LIMIT)
		except (OSError, ValueError, TypeError):
			return DEFAULT_LIMIT

	def set_limit(self, value: int) -> int:
		limit = clamp(int(value), MIN_LIMIT, MAX_LIMIT)
		self._write(self.descriptor.limit_pref_key, limit)
		return limit

	def items(self) -> List[Dict[str, Any]]:
		try:
			stored = self.preferences.read_local(self.descriptor.selection_pref_key)
		except (OSError, ValueError) as e:
			logger.warning(f"[Selection] Could not read selection: {e}")
			return []
		return [r for r in stored if isinstance(r, dict) and 'id' in r] if isinstance(stored, list) else []

	def set_items(self, records: List[Dict[str, Any]]) -> None:
		self._write(self.descriptor.selection_pref_key, list(records)[:self.limit()])

	def add(self, record: Dict[str, Any]) -> Tuple[bool, str]:
		"""Add a record; already-selected ids are accepted unchanged."""
		current = self.items()
		if any(r['id'] == record['id'] for r in current):
			return True, ''
		limit = self.limit()
		if len(current) >= limit:
			return False, f"Only {limit} items can be compared"
		current.append(record)
		self._write(self.descriptor.selection_pref_key, current)
		return True, ''

	def remove(self, item_id: int) -> None:
		self._write(self.descriptor.selection_pref_key, [r for r in self.items() if r['id'] != item_id])

	def clear(self) -> None:
		self._write(self.descriptor.selection_pref_key, [])

	def _write(self, key: str, value: Any) -> None:
		try:
			self.preferences.write_local(key, value)
		except (OSError, ValueError, TypeError) as e:
			logger.warning(f"[Selection] Could not persist '{key}': {e}")

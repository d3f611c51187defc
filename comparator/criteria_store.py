"""
Criteria store.
Loads, validates and persists the weight configuration of one category.
"""

from typing import Any, List, Optional

from loguru import logger

from .categories import CategoryDescriptor
from .models import Criterion

MIN_WEIGHT = 1
MAX_WEIGHT = 10


def is_valid_weight(value: Any) -> bool:
	return isinstance(value, int) and not isinstance(value, bool) and MIN_WEIGHT <= value <= MAX_WEIGHT


class CriteriaStore:
	"""
	Weight configuration of one category, backed by a preferences store
	exposing ``read_local(key)`` and ``write_local(key, value)``.
	Storage failures never propagate; defaults or the in-memory list win.
	"""

	def __init__(self, descriptor: CategoryDescriptor, preferences):
		self.descriptor = descriptor
		self.preferences = preferences
		self.key = descriptor.criteria_pref_key

	def load(self) -> List[Criterion]:
		"""Stored configuration when it is well formed, otherwise the built-in defaults."""
		try:
			stored = self.preferences.read_local(self.key)
		except (OSError, ValueError) as e:
			logger.warning(f"[Criteria] Could not read '{self.key}', using defaults: {e}")
			return self.descriptor.default_criteria()

		parsed = self._parse(stored)
		if parsed is None:
			if stored is not None:
				logger.info(f"[Criteria] Stored '{self.key}' is invalid, using defaults")
			return self.descriptor.default_criteria()
		return parsed

	def _parse(self, stored: Any) -> Optional[List[Criterion]]:
		if not isinstance(stored, list):
			return None
		criteria: List[Criterion] = []
		seen = set()
		for entry in stored:
			if not isinstance(entry, dict):
				return None
			key = entry.get('key')
			if key not in self.descriptor.keys or key in seen:
				continue  # unknown or duplicate entry
			weight = entry.get('weight')
			if not is_valid_weight(weight):
				return None
			name = entry.get('name') or self.descriptor.names[key]
			criteria.append(Criterion(key=key, name=str(name), weight=weight))
			seen.add(key)
		if seen != set(self.descriptor.keys):
			return None
		return criteria

	def save(self, criteria: List[Criterion]) -> None:
		try:
			self.preferences.write_local(self.key, [c.to_dict() for c in criteria])
		except (OSError, ValueError, TypeError) as e:
			logger.warning(f"[Criteria] Could not persist '{self.key}', keeping in-memory weights: {e}")

	def reset(self) -> List[Criterion]:
		defaults = self.descriptor.default_criteria()
		self.save(defaults)
		logger.info(f"[Criteria] Reset '{self.key}' to defaults")
		return defaults

	def update_weight(self, criteria: List[Criterion], key: str, weight: int) -> List[Criterion]:
		"""Return a copy of criteria with one weight changed, persisting the result."""
		if not is_valid_weight(weight):
			raise ValueError(f"Weight must be an integer between {MIN_WEIGHT} and {MAX_WEIGHT}, got {weight!r}")
		if key not in {c.key for c in criteria}:
			raise ValueError(f"Unknown criterion '{key}' for {self.descriptor.category.value}")
		updated = [
			Criterion(key=c.key, name=c.name, weight=weight if c.key == key else c.weight)
			for c in criteria
		]
		self.save(updated)
		return updated

"""
Attribute resolver.
Completes the numeric attributes of compared items by fetching detail records
for fields the summary records lack, memoizing results per item id.
"""

import asyncio
from typing import Any, Dict, Iterable, List, Optional, Set

from loguru import logger

from .categories import CategoryDescriptor
from .data_loader import DataLoader
from .models import Item


class AttributeResolver:
	"""
	Owns the backfill cache and in-flight set of one comparison session.

	The metadata client must expose ``async fetch_detail(category, item_id) -> dict``.
	Failed fetches leave the fields absent (scored as 0) and are not cached, so a
	later ``resolve`` call may try again.
	"""

	def __init__(self, descriptor: CategoryDescriptor, metadata_client, loader: Optional[DataLoader] = None):
		self.descriptor = descriptor
		self.client = metadata_client
		self.loader = loader or DataLoader()
		self._cache: Dict[int, Dict[str, Any]] = {}  # item id -> backfilled fields
		self._in_flight: Set[int] = set()
		self.fetch_count = 0  # number of detail requests issued

	def needs_backfill(self, item: Item) -> bool:
		if item.id in self._cache:
			return False
		return any(
			self.descriptor.is_absent(field, self.descriptor.field_value(item, field))
			for field in self.descriptor.backfill_fields
		)

	async def resolve(self, items: Iterable[Item]) -> None:
		"""Backfill every item that is missing a field and is not cached or in flight."""
		if self.client is None:  # offline session
			return
		pending: List[Item] = []
		for item in items:
			if item.id in self._in_flight or not self.needs_backfill(item):
				continue
			self._in_flight.add(item.id)
			pending.append(item)
		if not pending:
			return
		logger.debug(f"[Resolver] Backfilling {len(pending)} {self.descriptor.category.value} item(s)")
		await asyncio.gather(*(self._backfill(item) for item in pending))

	async def _backfill(self, item: Item) -> None:
		try:
			self.fetch_count += 1
			record = await self.client.fetch_detail(self.descriptor.category, item.id)
			detail = self.loader.parse_item(record, self.descriptor.category)
			self._cache[item.id] = {
				field: self.descriptor.field_value(detail, field)
				for field in self.descriptor.backfill_fields
			}
			logger.debug(f"[Resolver] Cached {item.id}: {self._cache[item.id]}")
		except Exception as e:
			logger.warning(f"[Resolver] Detail fetch failed for {item.id}; attributes stay absent: {e}")
		finally:
			self._in_flight.discard(item.id)

	def cached(self, item_id: int) -> Optional[Dict[str, Any]]:
		return self._cache.get(item_id)

	def attributes(self, item: Item) -> Dict[str, float]:
		"""Full numeric attribute tuple, using cached detail values for absent fields."""
		return self.descriptor.build_attributes(item, self._cache.get(item.id))

	def clear(self) -> None:
		self._cache.clear()

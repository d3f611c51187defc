"""
Ranking module.
Orders score rows, picks the winner and records opened comparisons in the user's history.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Sequence, Set

from loguru import logger

from .models import Category, ComparisonHistoryEntry, Item, ScoreRow

MIN_ITEMS = 2


class ViewState(str, Enum):
	IDLE = 'idle'  # fewer than two items selected
	COLLAPSED = 'collapsed'  # top pick summary
	EXPANDED = 'expanded'  # full breakdown


def selection_key(items: Sequence[Item]) -> str:
	"""Stable key of an item set: sorted ids joined by commas."""
	return ','.join(str(i) for i in sorted(item.id for item in items))


class RankingPresenter:
	"""
	Presents ranked rows for one comparison session.
	Opening the breakdown appends one history entry per distinct id-set, and only
	for signed-in users. The history store must expose
	``async append_history(user_id, entry_document)``.
	"""

	def __init__(self, category: Category, history_store=None, user_id: Optional[str] = None):
		self.category = category
		self.history_store = history_store
		self.user_id = user_id
		self.state = ViewState.IDLE
		self._recorded: Set[str] = set()  # keys emitted this session

	def rank(self, rows: Sequence[ScoreRow]) -> List[ScoreRow]:
		"""Descending by aggregate100; sorted() is stable so ties keep input order."""
		return sorted(rows, key=lambda r: r.aggregate100, reverse=True)

	def top_pick(self, rows: Sequence[ScoreRow]) -> Optional[ScoreRow]:
		ranked = self.rank(rows)
		return ranked[0] if ranked else None

	def update_selection(self, items: Sequence[Item]) -> ViewState:
		if len(items) < MIN_ITEMS:
			self.state = ViewState.IDLE
		elif self.state == ViewState.IDLE:
			self.state = ViewState.COLLAPSED
		return self.state

	def collapse(self) -> ViewState:
		if self.state == ViewState.EXPANDED:
			self.state = ViewState.COLLAPSED
		return self.state

	async def expand(self, items: Sequence[Item]) -> ViewState:
		"""Show the full breakdown; the first opening of an id-set is recorded."""
		if self.update_selection(items) == ViewState.IDLE:
			logger.debug("[Ranking] Expand ignored: fewer than two items selected")
			return self.state
		self.state = ViewState.EXPANDED
		await self._record(items)
		return self.state

	async def _record(self, items: Sequence[Item]) -> None:
		key = selection_key(items)
		if key in self._recorded:
			return
		if not self.user_id or self.history_store is None:
			logger.debug("[Ranking] No signed-in user; history not recorded")
			return
		self._recorded.add(key)
		entry = ComparisonHistoryEntry(
			category=self.category,
			names=[item.display_name for item in items if item.display_name],
			ids=[item.id for item in items],
			timestamp=datetime.now(timezone.utc).isoformat(),
		)
		try:
			await self.history_store.append_history(self.user_id, entry.to_document())
			logger.info(f"[Ranking] Recorded {self.category.value} comparison [{key}] for user {self.user_id}")
		except Exception as e:
			logger.warning(f"[Ranking] History write failed for [{key}]: {e}")

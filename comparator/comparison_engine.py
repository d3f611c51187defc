"""
Comparison engine module.
Wires resolver, criteria, scoring and ranking into one session per compared item set.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from .attribute_resolver import AttributeResolver
from .breakdown import Breakdown, build_breakdown
from .categories import CategoryDescriptor, get_descriptor
from .criteria_store import CriteriaStore
from .models import Criterion, Item, ScoreRow
from .normalization import NormalizationEngine
from .ranking import RankingPresenter, ViewState
from .scoring import ScoringEngine


@dataclass
class ComparisonResult:
	state: ViewState
	ranked: List[ScoreRow]
	top_pick: Optional[ScoreRow]
	breakdown: Optional[Breakdown] = None  # only while expanded


class ComparisonSession:
	"""
	High-level API for comparing films or series:
	select items, backfill missing attributes, tweak weights, rank and expand.
	Owns its resolver cache, so separate sessions never share state.
	"""

	def __init__(
		self,
		category,  # Category or 'movie' / 'tv'
		metadata_client,  # exposes async fetch_detail(category, item_id)
		preferences,  # exposes read_local / write_local
		history_store=None,  # exposes async append_history(user_id, entry)
		user_id: Optional[str] = None,  # None for guests
		current_year: Optional[int] = None,
	):
		self.descriptor: CategoryDescriptor = get_descriptor(category)
		self.resolver = AttributeResolver(self.descriptor, metadata_client)
		self.criteria_store = CriteriaStore(self.descriptor, preferences)
		self.scorer = ScoringEngine(self.descriptor, NormalizationEngine(current_year))
		self.presenter = RankingPresenter(self.descriptor.category, history_store, user_id)
		self.criteria: List[Criterion] = self.criteria_store.load()
		self.items: List[Item] = []
		logger.info(
			f"[Session] {self.descriptor.category.value} session ready | user={user_id or 'guest'} "
			f"| weights={[c.weight for c in self.criteria]}"
		)

	async def select(self, items: Sequence[Item]) -> ComparisonResult:
		"""
		Replace the compared items and wait for their backfill before ranking.
		The result is built from this call's items even if another select
		replaced the selection while the backfill was running.
		"""
		items = list(items)
		self.items = items
		self.presenter.update_selection(items)
		await self.resolver.resolve(items)
		return self.result(items)

	def scores(self, items: Optional[Sequence[Item]] = None) -> List[ScoreRow]:
		items = self.items if items is None else items
		return self.presenter.rank(self.scorer.score(items, self.criteria, self.resolver))

	def result(self, items: Optional[Sequence[Item]] = None) -> ComparisonResult:
		ranked = self.scores(items)
		state = self.presenter.state
		breakdown = build_breakdown(ranked, self.criteria, self.resolver) if state == ViewState.EXPANDED else None
		return ComparisonResult(
			state=state,
			ranked=ranked,
			top_pick=ranked[0] if ranked else None,
			breakdown=breakdown,
		)

	def set_weight(self, key: str, weight: int) -> ComparisonResult:
		self.criteria = self.criteria_store.update_weight(self.criteria, key, weight)
		logger.debug(f"[Session] Weight '{key}' -> {weight}")
		return self.result()

	def reset_weights(self) -> ComparisonResult:
		self.criteria = self.criteria_store.reset()
		return self.result()

	async def expand(self, items: Optional[Sequence[Item]] = None) -> ComparisonResult:
		items = self.items if items is None else list(items)
		await self.presenter.expand(items)
		return self.result(items)

	def collapse(self) -> ComparisonResult:
		self.presenter.collapse()
		return self.result()

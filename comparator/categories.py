"""
Category descriptors.
One descriptor per item category tells the generic engine which criteria exist,
how each is scored, what the defaults are and which fields need backfilling.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from .models import Category, Criterion, Item


class Rule(str, Enum):
	"""How a criterion maps raw values onto 0..10."""
	ABSOLUTE_RATING = 'absolute_rating'  # clamp the item's own rating
	ABSOLUTE_YEAR = 'absolute_year'  # recency on a fixed timeline
	RELATIVE = 'relative'  # min-max across the compared items


def _roi(attrs: Mapping[str, float]) -> float:
	budget = attrs.get('budget', 0.0)
	return attrs.get('revenue', 0.0) / budget if budget > 0 else 0.0


@dataclass(frozen=True)
class CategoryDescriptor:
	category: Category
	keys: Tuple[str, ...]  # criterion keys in display order
	names: Dict[str, str]
	default_weights: Dict[str, int]
	rules: Dict[str, Rule]
	base_year: int
	base_fields: Tuple[str, ...]  # always present on summary records
	backfill_fields: Tuple[str, ...]  # may need a detail fetch
	zero_is_absent: Tuple[str, ...]  # counters the API reports as 0 when unknown
	derived: Dict[str, Callable[[Mapping[str, float]], float]]
	criteria_pref_key: str
	selection_pref_key: str
	limit_pref_key: str

	def default_criteria(self) -> List[Criterion]:
		return [Criterion(key=k, name=self.names[k], weight=self.default_weights[k]) for k in self.keys]

	def rule_for(self, key: str) -> Rule:
		return self.rules.get(key, Rule.RELATIVE)

	def field_value(self, item: Item, field: str) -> Any:
		"""Raw value of a field on the item (None when the record lacks it)."""
		return getattr(item, field, None)

	def is_absent(self, field: str, value: Any) -> bool:
		if value is None:
			return True
		return field in self.zero_is_absent and not value

	def build_attributes(self, item: Item, cached: Optional[Mapping[str, Any]] = None) -> Dict[str, float]:
		"""
		Full numeric attribute tuple for one item.
		Summary values win; otherwise the cached detail value; otherwise 0.
		"""
		cached = cached or {}
		attrs: Dict[str, float] = {
			'rating': float(item.rating or 0.0),
			'year': float(item.release_year),
		}
		for field in self.base_fields:
			attrs[field] = float(self.field_value(item, field) or 0)
		for field in self.backfill_fields:
			value = self.field_value(item, field)
			if self.is_absent(field, value):
				value = cached.get(field)
			attrs[field] = float(value or 0)
		for key, fn in self.derived.items():
			attrs[key] = float(fn(attrs))
		return attrs


FILM = CategoryDescriptor(
	category=Category.FILM,
	keys=('rating', 'year', 'popularity', 'runtime', 'votes', 'revenue', 'roi'),
	names={
		'rating': 'Rating',
		'year': 'Release year (newer is better)',
		'popularity': 'Popularity',
		'runtime': 'Runtime (min)',
		'votes': 'Total votes',
		'revenue': 'Box office',
		'roi': 'Return on investment (revenue/budget)',
	},
	default_weights={'rating': 7, 'year': 5, 'popularity': 6, 'runtime': 5, 'votes': 4, 'revenue': 5, 'roi': 6},
	rules={'rating': Rule.ABSOLUTE_RATING, 'year': Rule.ABSOLUTE_YEAR},
	base_year=1900,
	base_fields=('popularity', 'votes'),
	backfill_fields=('runtime', 'revenue', 'budget'),
	zero_is_absent=('runtime',),
	derived={'roi': _roi},
	criteria_pref_key='film_criteria_defaults',
	selection_pref_key='compare_movies',
	limit_pref_key='compare_limit_movies',
)

SERIES = CategoryDescriptor(
	category=Category.SERIES,
	keys=('rating', 'year', 'popularity', 'votes', 'seasons', 'episodes', 'ep_runtime'),
	names={
		'rating': 'Rating',
		'year': 'First aired (newer is better)',
		'popularity': 'Popularity',
		'votes': 'Total votes',
		'seasons': 'Seasons',
		'episodes': 'Episodes',
		'ep_runtime': 'Episode runtime (min)',
	},
	default_weights={'rating': 7, 'year': 5, 'popularity': 6, 'votes': 5, 'seasons': 4, 'episodes': 5, 'ep_runtime': 3},
	rules={'rating': Rule.ABSOLUTE_RATING, 'year': Rule.ABSOLUTE_YEAR},
	base_year=1990,
	base_fields=('popularity', 'votes'),
	backfill_fields=('seasons', 'episodes', 'ep_runtime'),
	zero_is_absent=('seasons', 'episodes', 'ep_runtime'),
	derived={},
	criteria_pref_key='series_criteria_defaults',
	selection_pref_key='compare_tv',
	limit_pref_key='compare_limit_tv',
)

DESCRIPTORS = {Category.FILM: FILM, Category.SERIES: SERIES}


def get_descriptor(category) -> CategoryDescriptor:
	"""Look up a descriptor by Category or by its string value ('movie', 'tv')."""
	try:
		return DESCRIPTORS[Category(category)]
	except ValueError:
		raise ValueError(f"Unknown category: {category!r}") from None

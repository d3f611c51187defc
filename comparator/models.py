"""
Data models for the Catalog Comparator.
Defines the core data structures shared by the resolver, scorer and presenter.
"""

# Import dataclass to define simple "record-like" classes without boilerplate
from dataclasses import dataclass, field  # auto-generates __init__, __repr__, etc.
# Enum gives a closed set of category tags
from enum import Enum  # film vs series
# Import typing helpers for precise and self-documenting types
from typing import Any, Dict, List, Optional, Union  # containers and optionals


class Category(str, Enum):
	"""Item category; values match the metadata API path segment."""
	FILM = 'movie'
	SERIES = 'tv'


def year_from_date(value: Optional[str]) -> int:
	"""Extract the year from an ISO date string ('1999-03-31'); 0 when missing or malformed."""
	if not value:  # None or empty string
		return 0
	head = str(value).strip()[:4]  # leading YYYY
	return int(head) if head.isdigit() else 0


@dataclass
class Film:
	"""
	Represents one film as returned by the metadata API summary endpoints.
	Optional counters may be backfilled later from the detail endpoint.
	"""
	id: int  # stable id, unique among films
	title: str  # display title
	release_date: Optional[str] = None  # ISO date, e.g. "2010-07-15"
	rating: float = 0.0  # vote average on a 0-10 scale
	popularity: float = 0.0  # unbounded popularity signal
	votes: int = 0  # number of votes
	runtime: Optional[int] = None  # minutes; absent on list endpoints
	revenue: Optional[int] = None  # box office; absent on list endpoints
	budget: Optional[int] = None  # production budget; absent on list endpoints
	poster_path: Optional[str] = None  # optional poster path (for UI)

	@property
	def release_year(self) -> int:
		return year_from_date(self.release_date)

	@property
	def display_name(self) -> str:
		return self.title


@dataclass
class Series:
	"""
	Represents one TV series as returned by the metadata API summary endpoints.
	"""
	id: int  # stable id, unique among series
	name: str  # display name
	first_air_date: Optional[str] = None  # ISO date of the first episode
	rating: float = 0.0  # vote average on a 0-10 scale
	popularity: float = 0.0  # unbounded popularity signal
	votes: int = 0  # number of votes
	seasons: Optional[int] = None  # number of seasons
	episodes: Optional[int] = None  # number of episodes
	episode_runtimes: Optional[List[int]] = None  # per-episode runtimes in minutes
	poster_path: Optional[str] = None  # optional poster path (for UI)

	@property
	def release_year(self) -> int:
		return year_from_date(self.first_air_date)

	@property
	def ep_runtime(self) -> Optional[int]:
		"""First listed episode runtime, or None when the list is missing/empty."""
		if not self.episode_runtimes:
			return None
		return self.episode_runtimes[0]

	@property
	def display_name(self) -> str:
		return self.name


Item = Union[Film, Series]


@dataclass
class Criterion:
	"""One scoring dimension with its user-settable importance (1-10)."""
	key: str  # attribute tag, e.g. "rating" or "roi"
	name: str  # human-readable label
	weight: int  # importance in [1, 10]

	def to_dict(self) -> Dict[str, Any]:
		return {'key': self.key, 'name': self.name, 'weight': self.weight}


@dataclass
class ScoreRow:
	"""
	Derived score for one compared item.
	Recomputed whenever the item set, a weight or the attribute cache changes.
	"""
	item: Item  # the scored film or series
	scores: Dict[str, float] = field(default_factory=dict)  # criterion key -> 0..10
	aggregate10: float = 0.0  # weighted mean on 0..10
	aggregate100: int = 0  # rounded 0..100 band used for ordering


@dataclass
class ComparisonHistoryEntry:
	"""A comparison the user looked at in detail; appended to their history."""
	category: Category
	names: List[str]  # display names in selection order
	ids: List[int]  # item ids in selection order
	timestamp: str  # ISO-8601 UTC

	def to_document(self) -> Dict[str, Any]:
		"""Shape stored in the user's history array."""
		names_key = 'movies' if self.category == Category.FILM else 'shows'
		return {
			'type': self.category.value,
			names_key: list(self.names),
			'ids': list(self.ids),
			'timestamp': self.timestamp,
		}

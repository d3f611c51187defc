"""
Normalization module.
Maps raw attribute values onto a common 0..10 scale.
"""

from datetime import date
from typing import Callable, List, Mapping, Optional, Sequence

import numpy as np

Attributes = Mapping[str, float]


class NormalizationEngine:
	"""
	Per-criterion normalization:
	- relative: min-max across exactly the items being compared
	- rating: the item's own rating clamped to 0..10
	- year: recency on a fixed timeline starting at a per-category base year
	"""

	def __init__(self, current_year: Optional[int] = None):
		self.current_year = current_year or date.today().year

	def normalize(self, attrs: Sequence[Attributes], extractor: Callable[[Attributes], float]) -> List[float]:
		"""
		Min-max scale extractor(attrs) into 0..10, in input order.
		The range is floored at 1, so a criterion where every item ties scores 0 for all.
		"""
		if not attrs:
			return []
		values = np.array([extractor(a) for a in attrs], dtype=float)
		low = values.min()  # worst item maps to 0
		spread = max(1.0, float(values.max() - low))  # ties -> 0 for everyone
		return (((values - low) / spread) * 10.0).tolist()

	def rating(self, attrs: Sequence[Attributes]) -> List[float]:
		return [float(np.clip(a.get('rating', 0.0), 0.0, 10.0)) for a in attrs]

	def recency(self, attrs: Sequence[Attributes], base_year: int) -> List[float]:
		span = max(1, self.current_year - base_year)  # years on the timeline
		return [
			float(np.clip(((a.get('year', 0.0) - base_year) / span) * 10.0, 0.0, 10.0))
			for a in attrs
		]

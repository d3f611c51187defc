"""
Scoring module.
Combines the normalized criteria of each item into one weighted score.
"""

import math
from operator import itemgetter
from typing import Dict, List, Sequence

from loguru import logger

from .attribute_resolver import AttributeResolver
from .categories import CategoryDescriptor, Rule
from .models import Criterion, Item, ScoreRow
from .normalization import NormalizationEngine


def round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


class ScoringEngine:
	"""
	Computes one ScoreRow per item:
	- every criterion is normalized to 0..10 (absolute for rating/year, min-max otherwise)
	- aggregate10 = sum(weight * score) / sum(weight)
	- aggregate100 = aggregate10 * 10, rounded half up
	"""

	def __init__(self, descriptor: CategoryDescriptor, normalizer: NormalizationEngine):
		self.descriptor = descriptor
		self.normalizer = normalizer

	def criterion_scores(self, key: str, attrs: Sequence[Dict[str, float]]) -> List[float]:
		if key not in self.descriptor.keys:  # foreign key contributes nothing
			return [0.0] * len(attrs)
		rule = self.descriptor.rule_for(key)
		if rule == Rule.ABSOLUTE_RATING:
			return self.normalizer.rating(attrs)
		if rule == Rule.ABSOLUTE_YEAR:
			return self.normalizer.recency(attrs, self.descriptor.base_year)
		return self.normalizer.normalize(attrs, itemgetter(key))

	def score(self, items: Sequence[Item], criteria: Sequence[Criterion], resolver: AttributeResolver) -> List[ScoreRow]:
		"""Score items in input order; ordering is left to the presenter."""
		attrs = [resolver.attributes(item) for item in items]  # summary + cached detail values
		vectors = {c.key: self.criterion_scores(c.key, attrs) for c in criteria}  # key -> 0..10 per item
		total_weight = sum(c.weight for c in criteria) or 1  # no criteria -> divide by 1

		rows: List[ScoreRow] = []
		for i, item in enumerate(items):
			scores = {c.key: vectors[c.key][i] for c in criteria}
			weighted_sum = sum(c.weight * scores[c.key] for c in criteria)
			aggregate10 = weighted_sum / total_weight
			rows.append(ScoreRow(
				item=item,
				scores=scores,
				aggregate10=aggregate10,
				aggregate100=round_half_up(aggregate10 * 10),
			))
			logger.debug(f"[Scoring] {item.display_name} ({item.id}) | aggregate={aggregate10:.3f}")
		return rows

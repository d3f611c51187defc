"""
Breakdown module.
Builds the table rows and chart datasets shown when a comparison is expanded.
Charts are returned as plain data; drawing them is the caller's job.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Sequence

from .attribute_resolver import AttributeResolver
from .models import Criterion, ScoreRow

PALETTE = [
	'rgba(255, 99, 132, 0.6)',
	'rgba(54, 162, 235, 0.6)',
	'rgba(255, 206, 86, 0.6)',
	'rgba(75, 192, 192, 0.6)',
	'rgba(153, 102, 255, 0.6)',
	'rgba(255, 159, 64, 0.6)',
	'rgba(199, 199, 199, 0.6)',
]


def format_money(value: float) -> str:
	"""Compact dollar amount: $1.23B, $45.6M, $12K; '-' when not positive."""
	if not value or value <= 0:
		return '-'
	if value >= 1_000_000_000:
		return f"${value / 1_000_000_000:.2f}B"
	if value >= 1_000_000:
		return f"${value / 1_000_000:.1f}M"
	if value >= 1_000:
		return f"${value / 1_000:.0f}K"
	return f"${value:,.0f}"


def format_roi(revenue: float, budget: float) -> str:
	if not budget or budget <= 0:
		return '-'
	return f"{revenue / budget:.2f}x"


def _minutes(value: float) -> str:
	return f"{int(value)} min" if value else '-'


# raw value renderers per attribute key
FORMATTERS: Dict[str, Callable[[Dict[str, float]], str]] = {
	'rating': lambda a: f"{a['rating']:.1f}",
	'year': lambda a: str(int(a['year'])) if a['year'] else 'N/A',
	'popularity': lambda a: f"{a['popularity']:.1f}",
	'votes': lambda a: f"{int(a['votes']):,}",
	'runtime': lambda a: _minutes(a['runtime']),
	'revenue': lambda a: format_money(a['revenue']),
	'roi': lambda a: format_roi(a['revenue'], a['budget']),
	'seasons': lambda a: str(int(a['seasons'])),
	'episodes': lambda a: str(int(a['episodes'])),
	'ep_runtime': lambda a: _minutes(a['ep_runtime']),
}


@dataclass
class Breakdown:
	table: List[Dict[str, Any]] = field(default_factory=list)
	scores_chart: Dict[str, Any] = field(default_factory=dict)
	weights_chart: Dict[str, Any] = field(default_factory=dict)


def build_breakdown(ranked: Sequence[ScoreRow], criteria: Sequence[Criterion], resolver: AttributeResolver) -> Breakdown:
	"""Assemble table and chart data for rows already in ranked order."""
	table = []
	for position, row in enumerate(ranked):
		attrs = resolver.attributes(row.item)
		table.append({
			'id': row.item.id,
			'name': row.item.display_name,
			'poster_path': row.item.poster_path,
			'values': {c.key: FORMATTERS[c.key](attrs) for c in criteria if c.key in FORMATTERS},
			'scores': {k: round(v, 2) for k, v in row.scores.items()},
			'points': row.aggregate100,
			'is_top': position == 0,
		})

	scores_chart = {
		'labels': [row.item.display_name for row in ranked],
		'datasets': [{'label': 'Final score', 'data': [row.aggregate100 for row in ranked]}],
		'y_max': 100,
	}
	weights_chart = {
		'labels': [c.name for c in criteria],
		'datasets': [{
			'label': 'Importance',
			'data': [c.weight for c in criteria],
			'backgroundColor': [PALETTE[i % len(PALETTE)] for i in range(len(criteria))],
		}],
	}
	return Breakdown(table=table, scores_chart=scores_chart, weights_chart=weights_chart)

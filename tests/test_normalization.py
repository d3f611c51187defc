"""
Unit tests for NormalizationEngine: min-max scaling and the absolute rating/year rules.
"""

from operator import itemgetter

from comparator.normalization import NormalizationEngine


def test_min_max_bounds():
	engine = NormalizationEngine(current_year=2025)
	attrs = [{'votes': 3.0}, {'votes': 10.0}, {'votes': 7.0}]
	scores = engine.normalize(attrs, itemgetter('votes'))
	assert scores[0] == 0.0
	assert scores[1] == 10.0
	assert abs(scores[2] - 40 / 7) < 1e-9
	assert all(0.0 <= s <= 10.0 for s in scores)


def test_tied_values_all_score_zero():
	engine = NormalizationEngine(current_year=2025)
	attrs = [{'popularity': 42.5}, {'popularity': 42.5}]
	assert engine.normalize(attrs, itemgetter('popularity')) == [0.0, 0.0]


def test_small_spread_uses_unit_floor():
	engine = NormalizationEngine(current_year=2025)
	attrs = [{'roi': 1.2}, {'roi': 1.5}]
	scores = engine.normalize(attrs, itemgetter('roi'))
	assert scores[0] == 0.0
	assert abs(scores[1] - 3.0) < 1e-9


def test_empty_input():
	assert NormalizationEngine(current_year=2025).normalize([], itemgetter('votes')) == []


def test_rating_is_clamped_not_rescaled():
	engine = NormalizationEngine(current_year=2025)
	attrs = [{'rating': 6.5}, {'rating': 12.0}, {'rating': -1.0}]
	assert engine.rating(attrs) == [6.5, 10.0, 0.0]


def test_recency_on_fixed_timeline():
	engine = NormalizationEngine(current_year=2020)
	attrs = [{'year': 2020.0}, {'year': 1960.0}, {'year': 0.0}, {'year': 2030.0}]
	assert engine.recency(attrs, base_year=1900) == [10.0, 5.0, 0.0, 10.0]


def test_recency_of_old_only_selection_is_not_relative():
	engine = NormalizationEngine(current_year=2020)
	scores = engine.recency([{'year': 1930.0}, {'year': 1940.0}], base_year=1900)
	assert scores[1] < 10.0
	assert abs(scores[1] - 40 / 120 * 10) < 1e-9

"""
Unit tests for ScoringEngine together with RankingPresenter.rank.
Covers the worked three-film example, determinism and weight monotonicity.
"""

from comparator.attribute_resolver import AttributeResolver
from comparator.categories import FILM, SERIES
from comparator.models import Category, Criterion, Film, Series
from comparator.normalization import NormalizationEngine
from comparator.ranking import RankingPresenter
from comparator.scoring import ScoringEngine, round_half_up


def make_engine(descriptor=FILM):
	return ScoringEngine(descriptor, NormalizationEngine(current_year=2025)), AttributeResolver(descriptor, None)


def sample_films():
	return [
		Film(id=1, title='A', rating=9.0, votes=10000),
		Film(id=2, title='B', rating=7.0, votes=500),
		Film(id=3, title='C', rating=8.0, votes=5000),
	]


def test_worked_example_rating_and_votes():
	engine, resolver = make_engine()
	criteria = [Criterion('rating', 'Rating', 5), Criterion('votes', 'Votes', 5)]
	rows = engine.score(sample_films(), criteria, resolver)

	by_id = {r.item.id: r for r in rows}
	assert abs(by_id[3].scores['votes'] - 4500 / 9500 * 10) < 1e-9
	assert by_id[1].scores['rating'] == 9.0
	assert by_id[1].aggregate100 == 95
	assert by_id[2].aggregate100 == 35
	assert by_id[3].aggregate100 == 64

	ranked = RankingPresenter(Category.FILM).rank(rows)
	assert [r.item.title for r in ranked] == ['A', 'C', 'B']


def test_rows_keep_input_order():
	engine, resolver = make_engine()
	rows = engine.score(sample_films(), FILM.default_criteria(), resolver)
	assert [r.item.id for r in rows] == [1, 2, 3]


def test_tied_popularity_contributes_nothing():
	engine, resolver = make_engine()
	films = [Film(id=1, title='X', popularity=50.0), Film(id=2, title='Y', popularity=50.0)]
	rows = engine.score(films, [Criterion('popularity', 'Popularity', 6)], resolver)
	assert [r.scores['popularity'] for r in rows] == [0.0, 0.0]
	assert [r.aggregate100 for r in rows] == [0, 0]


def test_score_and_rank_are_deterministic():
	engine, resolver = make_engine()
	presenter = RankingPresenter(Category.FILM)
	films = sample_films() + [Film(id=4, title='D', rating=8.0, votes=5000)]
	first = presenter.rank(engine.score(films, FILM.default_criteria(), resolver))
	second = presenter.rank(engine.score(films, FILM.default_criteria(), resolver))
	assert [(r.item.id, r.aggregate100) for r in first] == [(r.item.id, r.aggregate100) for r in second]


def test_raising_a_led_criterion_weight_keeps_the_leader_ahead():
	engine, resolver = make_engine()
	presenter = RankingPresenter(Category.FILM)
	films = [
		Film(id=1, title='Popular', rating=6.0, votes=9000),
		Film(id=2, title='Acclaimed', rating=7.0, votes=1000),
	]
	for votes_weight in range(1, 11):
		criteria = [Criterion('rating', 'Rating', 5), Criterion('votes', 'Votes', votes_weight)]
		ranked = presenter.rank(engine.score(films, criteria, resolver))
		if ranked[0].item.id == 1:
			leader_weight = votes_weight
			break
	else:
		raise AssertionError("votes weight never promoted the vote leader")
	for votes_weight in range(leader_weight, 11):
		criteria = [Criterion('rating', 'Rating', 5), Criterion('votes', 'Votes', votes_weight)]
		ranked = presenter.rank(engine.score(films, criteria, resolver))
		assert ranked[0].item.id == 1


def test_unknown_criterion_scores_zero():
	engine, resolver = make_engine()
	rows = engine.score(sample_films(), [Criterion('seasons', 'Seasons', 5)], resolver)
	assert all(r.aggregate10 == 0.0 for r in rows)


def test_series_defaults_score_within_band():
	engine, resolver = make_engine(SERIES)
	shows = [
		Series(id=10, name='Long', first_air_date='2005-01-01', rating=8.0, votes=900, seasons=9, episodes=200, episode_runtimes=[22]),
		Series(id=11, name='Short', first_air_date='2019-05-01', rating=8.5, votes=400, seasons=1, episodes=6, episode_runtimes=[55]),
	]
	rows = engine.score(shows, SERIES.default_criteria(), resolver)
	assert all(0 <= r.aggregate100 <= 100 for r in rows)
	assert set(rows[0].scores) == set(SERIES.keys)


def test_round_half_up():
	assert round_half_up(94.5) == 95
	assert round_half_up(63.68) == 64
	assert round_half_up(0.49) == 0

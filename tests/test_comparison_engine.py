"""
End-to-end tests for ComparisonSession with fake metadata and history collaborators
and real file-backed preferences/history stores.
"""

import asyncio

import pytest

from comparator.comparison_engine import ComparisonSession
from comparator.history import JsonHistoryStore
from comparator.models import Category, Film
from comparator.preferences import JsonPreferencesStore
from comparator.ranking import ViewState


class FakeMetadataClient:
	def __init__(self, details):
		self.details = details
		self.calls = 0

	async def fetch_detail(self, category, item_id):
		self.calls += 1
		return self.details[item_id]


DETAILS = {
	1: {'id': 1, 'title': 'Blockbuster', 'runtime': 150, 'revenue': 2_000_000_000, 'budget': 200_000_000},
	2: {'id': 2, 'title': 'Indie', 'runtime': 90, 'revenue': 30_000_000, 'budget': 1_000_000},
}


def summaries():
	return [
		Film(id=1, title='Blockbuster', release_date='2019-04-24', rating=8.3, popularity=90.0, votes=25000),
		Film(id=2, title='Indie', release_date='2014-01-17', rating=7.9, popularity=12.0, votes=3000),
	]


def make_session(tmp_path, user_id='u1'):
	client = FakeMetadataClient(DETAILS)
	session = ComparisonSession(
		Category.FILM,
		client,
		JsonPreferencesStore(tmp_path / 'prefs.json'),
		JsonHistoryStore(tmp_path / 'history'),
		user_id=user_id,
		current_year=2025,
	)
	return session, client


def test_select_backfills_then_ranks(tmp_path):
	session, client = make_session(tmp_path)
	result = asyncio.run(session.select(summaries()))
	assert client.calls == 2
	assert result.state == ViewState.COLLAPSED
	assert result.breakdown is None
	assert result.top_pick is result.ranked[0]
	assert result.top_pick.scores['runtime'] == 10.0
	assert [r.item.id for r in result.ranked] == [1, 2]


def test_expand_records_history_once(tmp_path):
	session, _ = make_session(tmp_path)

	async def run():
		await session.select(summaries())
		first = await session.expand()
		session.collapse()
		await session.expand()
		return first

	result = asyncio.run(run())
	assert result.state == ViewState.EXPANDED
	assert result.breakdown is not None
	history = JsonHistoryStore(tmp_path / 'history').read_history('u1')
	assert len(history) == 1
	assert history[0]['ids'] == [1, 2]
	assert history[0]['movies'] == ['Blockbuster', 'Indie']


def test_weights_persist_across_sessions(tmp_path):
	session, _ = make_session(tmp_path)
	asyncio.run(session.select(summaries()))
	session.set_weight('roi', 10)
	fresh, _ = make_session(tmp_path)
	assert {c.key: c.weight for c in fresh.criteria}['roi'] == 10
	fresh.reset_weights()
	assert {c.key: c.weight for c in make_session(tmp_path)[0].criteria}['roi'] == 6


def test_weight_change_can_flip_the_top_pick(tmp_path):
	session, _ = make_session(tmp_path)
	asyncio.run(session.select(summaries()))
	for key in ('year', 'popularity', 'runtime', 'votes', 'revenue'):
		session.set_weight(key, 1)
	result = session.set_weight('roi', 10)
	assert result.top_pick.item.id == 2


def test_invalid_weight_is_rejected(tmp_path):
	session, _ = make_session(tmp_path)
	with pytest.raises(ValueError):
		session.set_weight('rating', 42)


def test_sessions_do_not_share_caches(tmp_path):
	first, first_client = make_session(tmp_path)
	second, second_client = make_session(tmp_path)
	asyncio.run(first.select(summaries()))
	asyncio.run(second.select(summaries()))
	assert first_client.calls == 2 and second_client.calls == 2


def test_unknown_category_is_rejected(tmp_path):
	with pytest.raises(ValueError):
		ComparisonSession('books', None, JsonPreferencesStore(tmp_path / 'prefs.json'))


class SlowMetadataClient(FakeMetadataClient):
	async def fetch_detail(self, category, item_id):
		await asyncio.sleep(0.01)
		return await super().fetch_detail(category, item_id)


def test_overlapping_selects_rank_their_own_items(tmp_path):
	session = ComparisonSession(
		Category.FILM,
		SlowMetadataClient(DETAILS),
		JsonPreferencesStore(tmp_path / 'prefs.json'),
		current_year=2025,
	)
	complete = [
		Film(id=3, title='Known', release_date='2001-01-01', rating=7.0, popularity=5.0, votes=100,
			runtime=100, revenue=10, budget=5),
		Film(id=4, title='Also Known', release_date='2002-01-01', rating=6.0, popularity=4.0, votes=90,
			runtime=95, revenue=8, budget=4),
	]

	async def run():
		first = asyncio.create_task(session.select(summaries()))
		await asyncio.sleep(0)  # first select is now waiting on its backfill
		second = await session.select(complete)
		return await first, second

	first, second = asyncio.run(run())
	assert sorted(r.item.id for r in first.ranked) == [1, 2]
	assert sorted(r.item.id for r in second.ranked) == [3, 4]
	assert [i.id for i in session.items] == [3, 4]

"""
Unit tests for DataLoader: API record parsing and JSONL loading.
Run: python tests/test_data_loader.py
"""

import json
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
	sys.path.insert(0, str(ROOT))

from comparator.data_loader import DataLoader
from comparator.models import Category, Film, Series, year_from_date


def assert_equal(actual, expected, msg):
	if actual != expected:
		raise AssertionError(f"{msg} | expected={expected}, actual={actual}")


def test_parse_film_api_record():
	loader = DataLoader()
	film = loader.parse_item({
		'id': 27205,
		'title': 'Inception',
		'release_date': '2010-07-15',
		'vote_average': 8.4,
		'vote_count': 35000,
		'popularity': 83.2,
		'runtime': 148,
		'budget': 160000000,
		'revenue': 825532764,
	}, Category.FILM)
	assert isinstance(film, Film)
	assert_equal(film.release_year, 2010, "release year from date")
	assert_equal(film.rating, 8.4, "vote_average -> rating")
	assert_equal(film.votes, 35000, "vote_count -> votes")
	assert_equal(film.runtime, 148, "runtime kept")


def test_parse_summary_leaves_detail_fields_absent():
	film = DataLoader().parse_item({'id': 1, 'title': 'X', 'vote_average': 6.0}, Category.FILM)
	assert film.runtime is None and film.revenue is None and film.budget is None
	assert_equal(film.release_year, 0, "missing date -> year 0")


def test_parse_series_api_record():
	show = DataLoader().parse_item({
		'id': 1396,
		'name': 'Breaking Bad',
		'first_air_date': '2008-01-20',
		'vote_average': 8.9,
		'vote_count': 14000,
		'popularity': 300.5,
		'number_of_seasons': 5,
		'number_of_episodes': 62,
		'episode_run_time': [45, 47],
	}, Category.SERIES)
	assert isinstance(show, Series)
	assert_equal(show.seasons, 5, "number_of_seasons -> seasons")
	assert_equal(show.episodes, 62, "number_of_episodes -> episodes")
	assert_equal(show.ep_runtime, 45, "first episode runtime")
	assert_equal(show.display_name, 'Breaking Bad', "display name")


def test_series_empty_runtime_list_is_absent():
	show = DataLoader().parse_item({'id': 2, 'name': 'Y', 'episode_run_time': []}, Category.SERIES)
	assert show.ep_runtime is None


def test_year_from_date_handles_garbage():
	assert_equal(year_from_date('1999-03-31'), 1999, "iso date")
	assert_equal(year_from_date(''), 0, "empty")
	assert_equal(year_from_date('unknown'), 0, "not a date")


def test_load_jsonl_skips_bad_lines():
	with tempfile.TemporaryDirectory() as tmp:
		path = Path(tmp) / 'films.jsonl'
		lines = [
			json.dumps({'id': 1, 'title': 'A', 'vote_average': 7.0}),
			'{not json',
			'',
			json.dumps({'title': 'no id'}),
			json.dumps({'id': 2, 'title': 'B', 'vote_average': 6.0}),
		]
		path.write_text('\n'.join(lines), encoding='utf-8')
		films = DataLoader().load_items_from_jsonl(str(path), Category.FILM)
	assert_equal([f.id for f in films], [1, 2], "only valid records kept")


def test_load_jsonl_skips_non_finite_numbers():
	with tempfile.TemporaryDirectory() as tmp:
		path = Path(tmp) / 'films.jsonl'
		lines = [
			json.dumps({'id': 1, 'title': 'A'}),
			'{"id": 2, "title": "B", "vote_count": 1e400}',
			'{"id": 4, "title": "D", "vote_average": NaN}',
			json.dumps({'id': 3, 'title': 'C'}),
		]
		path.write_text('\n'.join(lines), encoding='utf-8')
		films = DataLoader().load_items_from_jsonl(str(path), Category.FILM)
	assert_equal([f.id for f in films], [1, 3], "overflowing and NaN records skipped")


def test_parse_rejects_nan_strings():
	for bad in ({'id': 1, 'vote_average': 'NaN'}, {'id': 1, 'popularity': 'inf'}, {'id': 1e400}):
		try:
			DataLoader().parse_item(bad, Category.FILM)
		except ValueError:
			continue
		raise AssertionError(f"non-finite record should raise ValueError: {bad}")


def test_load_missing_file_raises():
	try:
		DataLoader().load_items_from_jsonl('does/not/exist.jsonl', Category.FILM)
	except FileNotFoundError:
		return
	raise AssertionError("missing file should raise FileNotFoundError")


def main():
	print("Running DataLoader tests...")
	test_parse_film_api_record()
	test_parse_summary_leaves_detail_fields_absent()
	test_parse_series_api_record()
	test_series_empty_runtime_list_is_absent()
	test_year_from_date_handles_garbage()
	test_load_jsonl_skips_bad_lines()
	test_load_jsonl_skips_non_finite_numbers()
	test_parse_rejects_nan_strings()
	test_load_missing_file_raises()
	print("All DataLoader tests passed!")


if __name__ == '__main__':
	main()

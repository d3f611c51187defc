"""
Rank a file of catalog items.

This script:
1) Loads summary records from a JSONL file (one TMDb record per line)
2) Backfills missing attributes from TMDb when TMDB_API_KEY is set
3) Scores the items with the saved (or default) weights
4) Logs the ranked table and the top pick

--weight overrides apply to this run only; saved weights are left untouched.

Usage:
    python -m scripts.compare_items data/films.jsonl --category movie
    python -m scripts.compare_items data/shows.jsonl --category tv --weight rating=10 --offline
"""

import argparse
import asyncio
from dataclasses import replace

from loguru import logger

from comparator.categories import get_descriptor
from comparator.comparison_engine import ComparisonSession
from comparator.config import configure_logging, load_settings
from comparator.criteria_store import MAX_WEIGHT, MIN_WEIGHT, is_valid_weight
from comparator.data_loader import DataLoader
from comparator.models import Category
from comparator.preferences import JsonPreferencesStore
from comparator.tmdb_client import TMDbClient


def parse_weight(value: str):
	"""argparse type for KEY=N overrides."""
	key, sep, number = value.partition('=')
	try:
		weight = int(number)
	except ValueError:
		weight = None
	if not sep or not key.strip() or not is_valid_weight(weight):
		raise argparse.ArgumentTypeError(f"expected KEY=N with N in {MIN_WEIGHT}-{MAX_WEIGHT}, got {value!r}")
	return key.strip(), weight


def parse_args(argv=None):
	parser = argparse.ArgumentParser(description="Rank films or series with weighted criteria.")
	parser.add_argument('path', help="JSONL file of summary records")
	parser.add_argument('--category', choices=[c.value for c in Category], default=Category.FILM.value)
	parser.add_argument(
		'--weight', action='append', default=[], type=parse_weight, metavar='KEY=N',
		help="override a weight (1-10) for this run only",
	)
	parser.add_argument('--offline', action='store_true', help="skip detail backfill")
	args = parser.parse_args(argv)

	# keys depend on the category, so they are checked after parsing
	keys = get_descriptor(args.category).keys
	unknown = [key for key, _ in args.weight if key not in keys]
	if unknown:
		parser.error(f"unknown criteria for {args.category}: {', '.join(unknown)} (choose from {', '.join(keys)})")
	return args


def apply_overrides(criteria, overrides):
	"""Return criteria with the given (key, weight) pairs applied, without persisting them."""
	weights = dict(overrides)  # last override of a key wins
	return [replace(c, weight=weights[c.key]) if c.key in weights else c for c in criteria]


async def run(args) -> None:
	settings = load_settings()
	configure_logging(settings.log_level)

	category = Category(args.category)
	items = DataLoader().load_items_from_jsonl(args.path, category)
	if len(items) < 2:
		logger.warning(f"[Compare] Need at least two items, got {len(items)}")
		return

	client = None
	if settings.tmdb_api_key and not args.offline:
		client = TMDbClient(settings.tmdb_api_key, settings.tmdb_base_url, settings.tmdb_language, settings.tmdb_timeout)

	session = ComparisonSession(category, client, JsonPreferencesStore(settings.preferences_path))
	session.criteria = apply_overrides(session.criteria, args.weight)

	await session.select(items)
	result = await session.expand()

	logger.info("=" * 60)
	for position, row in enumerate(result.breakdown.table, 1):
		values = ' | '.join(f"{k}={v}" for k, v in row['values'].items())
		logger.info(f"{position:>2}. [{row['points']:>3} pts] {row['name']} | {values}")
	logger.info("=" * 60)
	if result.top_pick:
		logger.info(f"Top pick: {result.top_pick.item.display_name} ({result.top_pick.aggregate100} pts)")


def main(argv=None):
	asyncio.run(run(parse_args(argv)))


if __name__ == '__main__':
	main()

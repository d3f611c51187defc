"""
Data loading module.
Turns raw metadata API records (dicts or JSON Lines files) into Film/Series objects.
"""

# Standard libs for JSON parsing, typing, and paths
import json  # read JSON lines
import math  # finite checks for numeric fields
from typing import Any, Dict, List, Optional  # type hints
from pathlib import Path  # filesystem-safe paths

# Import our item data classes used across the project
from .models import Category, Film, Item, Series  # structured item records

# Console logging
from loguru import logger  # console logger


class DataLoader:
	"""
	Handles parsing of film and series records coming from the metadata API.
	Summary records (search/list endpoints) and detail records share one parser;
	fields the record does not carry stay None so they can be backfilled later.
	"""

	def load_items_from_jsonl(self, filepath: str, category: Category) -> List[Item]:
		"""
		Load items from a JSON Lines (JSONL) file where each line is one API record.
		Returns a list of Film or Series objects depending on the category.
		"""
		items = []  # accumulator for parsed items
		filepath = Path(filepath)  # normalize path

		# Validate the file presence early to give clear error messages
		if not filepath.exists():
			raise FileNotFoundError(f"Item data file not found: {filepath}")

		logger.info(f"[DataLoader] Loading {category.value} records from {filepath}...")  # log action

		# Read line-by-line so large exports stay cheap
		with open(filepath, 'r', encoding='utf-8') as f:
			for line_num, line in enumerate(f, 1):  # keep track of line number for diagnostics
				if not line.strip():  # blank separator lines
					continue
				try:
					data = json.loads(line.strip())  # parse JSON object per line
					items.append(self.parse_item(data, category))  # dict -> Film/Series
				except json.JSONDecodeError as e:
					logger.warning(f"[DataLoader] Skipping invalid JSON at line {line_num}: {e}")  # malformed line
					continue
				except (TypeError, ValueError) as e:
					logger.warning(f"[DataLoader] Error parsing record at line {line_num}: {e}")  # bad field types
					continue

		logger.info(f"[DataLoader] Successfully loaded {len(items)} items.")  # summary
		return items

	def parse_item(self, data: Dict[str, Any], category: Category) -> Item:
		"""Dispatch a raw record to the parser of its category."""
		if not isinstance(data, dict):
			raise TypeError(f"Expected a JSON object, got {type(data).__name__}")
		if 'id' not in data:
			raise ValueError("Record has no 'id'")
		if self._to_int(data['id']) is None:
			raise ValueError("Record has an empty 'id'")
		if category == Category.FILM:
			return self._parse_film_data(data)
		return self._parse_series_data(data)

	def _parse_film_data(self, data: Dict[str, Any]) -> Film:
		"""
		Convert a raw film record into a Film.
		Accepts both our own field names and the API's (vote_average, vote_count).
		"""
		return Film(
			id=self._to_int(data['id']),  # ids are integers on the API
			title=str(data.get('title') or data.get('original_title') or ''),  # prefer localized title
			release_date=data.get('release_date') or None,  # empty string means unknown
			rating=self._to_float(data.get('vote_average', data.get('rating'))) or 0.0,
			popularity=self._to_float(data.get('popularity')) or 0.0,
			votes=self._to_int(data.get('vote_count', data.get('votes'))) or 0,
			runtime=self._to_int(data.get('runtime')),  # optional
			revenue=self._to_int(data.get('revenue')),  # optional
			budget=self._to_int(data.get('budget')),  # optional
			poster_path=data.get('poster_path'),  # optional
		)

	def _parse_series_data(self, data: Dict[str, Any]) -> Series:
		"""Convert a raw series record into a Series."""
		runtimes = data.get('episode_run_time', data.get('episode_runtimes'))
		return Series(
			id=self._to_int(data['id']),
			name=str(data.get('name') or data.get('original_name') or ''),
			first_air_date=data.get('first_air_date') or None,
			rating=self._to_float(data.get('vote_average', data.get('rating'))) or 0.0,
			popularity=self._to_float(data.get('popularity')) or 0.0,
			votes=self._to_int(data.get('vote_count', data.get('votes'))) or 0,
			seasons=self._to_int(data.get('number_of_seasons', data.get('seasons'))),
			episodes=self._to_int(data.get('number_of_episodes', data.get('episodes'))),
			episode_runtimes=self._parse_int_list(runtimes),
			poster_path=data.get('poster_path'),
		)

	def _to_int(self, value: Any) -> Optional[int]:
		"""Coerce numbers and numeric strings to int; None stays None."""
		number = self._to_float(value)
		return None if number is None else int(number)

	def _to_float(self, value: Any) -> Optional[float]:
		"""Coerce to float; NaN and infinities raise ValueError so the record is rejected."""
		if value is None or value == '':
			return None
		number = float(value)
		if not math.isfinite(number):
			raise ValueError(f"Non-finite number: {value!r}")
		return number

	def _parse_int_list(self, value: Any) -> Optional[List[int]]:
		"""Normalize a list of runtimes; a bare number becomes a one-element list."""
		if value is None:
			return None
		if isinstance(value, list):
			return [self._to_int(v) for v in value if v is not None and v != '']
		return [self._to_int(value)]

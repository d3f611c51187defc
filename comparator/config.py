"""
Runtime configuration.
Settings come from the environment, optionally seeded from a .env file.
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]  # project root


@dataclass(frozen=True)
class Settings:
	tmdb_api_key: Optional[str]
	tmdb_base_url: str
	tmdb_language: str
	tmdb_timeout: float
	preferences_path: Path
	history_dir: Path
	log_level: str
	max_sessions: int  # API comparison sessions kept in memory


def load_settings(env_file: Optional[str] = None) -> Settings:
	"""Read settings from the environment after loading the .env file (if any)."""
	load_dotenv(env_file or ROOT / '.env')
	return Settings(
		tmdb_api_key=os.getenv('TMDB_API_KEY') or None,
		tmdb_base_url=os.getenv('TMDB_BASE_URL', 'https://api.themoviedb.org/3').rstrip('/'),
		tmdb_language=os.getenv('TMDB_LANGUAGE', 'en-US'),
		tmdb_timeout=float(os.getenv('TMDB_TIMEOUT', '10')),
		preferences_path=Path(os.getenv('PREFERENCES_PATH', str(ROOT / 'data' / 'preferences.json'))),
		history_dir=Path(os.getenv('HISTORY_DIR', str(ROOT / 'data' / 'history'))),
		log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
		max_sessions=max(1, int(os.getenv('MAX_SESSIONS', '256'))),
	)


def configure_logging(level: str = 'INFO') -> None:
	"""Replace loguru's default sink with a stderr sink at the requested level."""
	logger.remove()
	logger.add(sys.stderr, level=level)
	logger.debug(f"[Config] Logging configured at level {level}")

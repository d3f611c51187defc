"""
FastAPI server exposing the comparison engine.
Endpoints:
- GET  /health: basic health check
- GET  /criteria/{category}: current weights ('movie' or 'tv')
- PUT  /criteria/{category}/{key}: change one weight (1-10)
- POST /criteria/{category}/reset: restore default weights
- POST /compare/{category}: rank raw item records, optionally expanding the breakdown
- POST /compare/{category}/collapse: fold the breakdown back to the top pick
- GET/POST /selection/{category}, DELETE /selection/{category}/{id}: the saved compare list

Sessions live in process memory per (user, category), so a comparison opened
twice by the same user is recorded in their history only once. At most
MAX_SESSIONS are kept; the least recently used one is dropped first.
"""

# Import standard libraries for timing and typing
import time  # measure startup and request latencies
from typing import Any, Dict, List, Optional, Tuple  # precise typing for clarity

# Import FastAPI for building the web API and Pydantic for request/response models
from fastapi import FastAPI, HTTPException  # FastAPI primitives
from pydantic import BaseModel, Field  # schema definitions

# Import our internal modules for parsing, scoring and persistence
from comparator.categories import get_descriptor  # per-category criteria tables
from comparator.comparison_engine import ComparisonResult, ComparisonSession  # core engine
from comparator.config import configure_logging, load_settings  # env-driven settings
from comparator.data_loader import DataLoader  # raw API record -> Film/Series
from comparator.history import JsonHistoryStore  # per-user comparison history
from comparator.models import Category  # 'movie' / 'tv'
from comparator.preferences import JsonPreferencesStore  # per-device preferences
from comparator.selection import SelectionStore  # saved compare list
from comparator.tmdb_client import TMDbClient  # detail backfill

# Import loguru for simple, structured console logging
from loguru import logger  # convenient console logger

# Instantiate the FastAPI application with metadata
app = FastAPI(title="Catalog Comparator API", version="1.0.0")  # web app

# Shared collaborators, created on startup
SETTINGS = None  # loaded Settings
CLIENT: Optional[TMDbClient] = None  # None when no API key is configured
PREFERENCES: Optional[JsonPreferencesStore] = None  # weights, compare lists, limits
HISTORY: Optional[JsonHistoryStore] = None  # signed-in users' comparison history
SESSIONS: Dict[Tuple[str, str], ComparisonSession] = {}  # insertion order doubles as LRU order
MAX_SESSIONS: int = 256  # replaced from settings on startup
LOADER = DataLoader()  # stateless record parser
STARTUP_TIME_S: float = 0.0  # measures how long startup took


# One weighted criterion as shown to clients
class CriterionOut(BaseModel):
	key: str  # attribute key, e.g. 'rating'
	name: str  # display name
	weight: int  # importance 1-10


# Body of a weight change
class WeightIn(BaseModel):
	weight: int = Field(..., ge=1, le=10)  # out-of-range values are rejected with 422


# Body of a comparison request
class CompareRequest(BaseModel):
	items: List[Dict[str, Any]]  # raw metadata API records
	user_id: Optional[str] = None  # omitted for guests
	expand: bool = False  # open the full breakdown right away


# One scored item
class ScoreRowOut(BaseModel):
	id: int  # metadata API id
	name: str  # title or series name
	scores: Dict[str, float]  # per-criterion 0-10 scores
	aggregate10: float  # weighted mean 0-10
	aggregate100: int  # rounded 0-100 points


# Table and chart data of an expanded comparison
class BreakdownOut(BaseModel):
	table: List[Dict[str, Any]]  # ranked rows with formatted values
	scores_chart: Dict[str, Any]  # bar chart of final points
	weights_chart: Dict[str, Any]  # doughnut chart of weights


# Complete comparison response payload
class CompareResponse(BaseModel):
	category: str  # 'movie' or 'tv'
	state: str  # idle / collapsed / expanded
	elapsed_ms: float  # server-side time in ms
	criteria: List[CriterionOut]  # weights used for this ranking
	ranked: List[ScoreRowOut]  # best first
	top_pick: Optional[ScoreRowOut] = None  # first ranked row, if any
	breakdown: Optional[BreakdownOut] = None  # only while expanded


# FastAPI startup hook to build the shared stores once
@app.on_event("startup")
async def startup_event():
	"""Load settings and build the shared stores."""
	global SETTINGS, CLIENT, PREFERENCES, HISTORY, MAX_SESSIONS, STARTUP_TIME_S  # module-level globals
	start = time.time()  # start timer for startup latency

	SETTINGS = load_settings()  # .env + environment
	configure_logging(SETTINGS.log_level)  # one stderr sink at the configured level
	PREFERENCES = JsonPreferencesStore(SETTINGS.preferences_path)
	HISTORY = JsonHistoryStore(SETTINGS.history_dir)
	MAX_SESSIONS = SETTINGS.max_sessions

	# Backfill is optional; without a key missing attributes simply score 0
	if SETTINGS.tmdb_api_key:
		CLIENT = TMDbClient(
			SETTINGS.tmdb_api_key,
			base_url=SETTINGS.tmdb_base_url,
			language=SETTINGS.tmdb_language,
			timeout=SETTINGS.tmdb_timeout,
		)
	else:
		logger.warning("[API] TMDB_API_KEY not set; missing attributes will score as 0")

	STARTUP_TIME_S = time.time() - start  # elapsed seconds
	logger.info(f"[API] Startup complete in {STARTUP_TIME_S:.2f}s")  # summary log


def _category(value: str) -> Category:
	"""Map a path segment to a Category; unknown values are a 404."""
	try:
		return get_descriptor(value).category
	except ValueError as e:
		raise HTTPException(status_code=404, detail=str(e))


def _session(category: Category, user_id: Optional[str]) -> ComparisonSession:
	"""Fetch or create the session for (user, category), evicting the least recently used."""
	key = (user_id or '', category.value)  # guests share one session per category
	session = SESSIONS.pop(key, None)  # re-inserted below as most recent
	if session is None:
		session = ComparisonSession(category, CLIENT, PREFERENCES, HISTORY, user_id=user_id)
	SESSIONS[key] = session

	# Oldest entries come first in a dict
	while len(SESSIONS) > MAX_SESSIONS:
		evicted = next(iter(SESSIONS))
		del SESSIONS[evicted]
		logger.debug(f"[API] Evicted session {evicted}")
	return session


def _row_out(row) -> ScoreRowOut:
	"""Convert an engine ScoreRow to the response schema."""
	return ScoreRowOut(
		id=row.item.id,
		name=row.item.display_name,
		scores={k: round(v, 3) for k, v in row.scores.items()},
		aggregate10=round(row.aggregate10, 3),
		aggregate100=row.aggregate100,
	)


def _response(session: ComparisonSession, result: ComparisonResult, start: float) -> CompareResponse:
	breakdown = None  # absent unless expanded
	if result.breakdown is not None:
		breakdown = BreakdownOut(
			table=result.breakdown.table,
			scores_chart=result.breakdown.scores_chart,
			weights_chart=result.breakdown.weights_chart,
		)
	return CompareResponse(
		category=session.descriptor.category.value,
		state=result.state.value,
		elapsed_ms=round((time.time() - start) * 1000, 2),
		criteria=[CriterionOut(**c.to_dict()) for c in session.criteria],
		ranked=[_row_out(r) for r in result.ranked],
		top_pick=_row_out(result.top_pick) if result.top_pick else None,
		breakdown=breakdown,
	)


def _selection(category: str) -> SelectionStore:
	return SelectionStore(get_descriptor(_category(category)), PREFERENCES)


# Simple health endpoint for readiness checks
@app.get("/health")
async def health():
	"""Return minimal health info for liveness/readiness probes."""
	return {
		"status": "ok",  # constant indicator
		"metadata_client": CLIENT is not None,  # True if backfill is available
		"sessions": len(SESSIONS),  # live comparison sessions
		"startup_seconds": round(STARTUP_TIME_S, 2),  # startup latency
	}


# Weight endpoints
@app.get("/criteria/{category}", response_model=List[CriterionOut])
async def get_criteria(category: str, user_id: Optional[str] = None):
	session = _session(_category(category), user_id)
	return [CriterionOut(**c.to_dict()) for c in session.criteria]


@app.put("/criteria/{category}/{key}", response_model=List[CriterionOut])
async def set_weight(category: str, key: str, body: WeightIn, user_id: Optional[str] = None):
	session = _session(_category(category), user_id)
	try:
		session.set_weight(key, body.weight)  # persisted to preferences
	except ValueError as e:  # unknown key for this category
		raise HTTPException(status_code=422, detail=str(e))
	return [CriterionOut(**c.to_dict()) for c in session.criteria]


@app.post("/criteria/{category}/reset", response_model=List[CriterionOut])
async def reset_criteria(category: str, user_id: Optional[str] = None):
	session = _session(_category(category), user_id)
	session.reset_weights()
	return [CriterionOut(**c.to_dict()) for c in session.criteria]


# Main comparison endpoint
@app.post("/compare/{category}", response_model=CompareResponse)
async def compare(category: str, request: CompareRequest):
	"""Backfill, score and rank the posted items."""
	start = time.time()  # start timer
	cat = _category(category)

	# Parse every record up front so one bad record rejects the whole request
	try:
		items = [LOADER.parse_item(record, cat) for record in request.items]
	except (TypeError, ValueError) as e:
		raise HTTPException(status_code=422, detail=f"Invalid item record: {e}")

	# Delegate to the session; expand works on this request's items, not a concurrent one's
	session = _session(cat, request.user_id)
	result = await session.select(items)
	if request.expand:
		result = await session.expand(items)
	logger.info(f"[API] /compare/{cat.value} ranked {len(result.ranked)} items in {(time.time() - start) * 1000:.2f} ms")
	return _response(session, result, start)


@app.post("/compare/{category}/collapse", response_model=CompareResponse)
async def collapse(category: str, user_id: Optional[str] = None):
	start = time.time()
	session = _session(_category(category), user_id)
	return _response(session, session.collapse(), start)


# Saved compare list endpoints
@app.get("/selection/{category}")
async def get_selection(category: str):
	store = _selection(category)
	return {"limit": store.limit(), "items": store.items()}


@app.post("/selection/{category}")
async def add_to_selection(category: str, record: Dict[str, Any]):
	if 'id' not in record:  # the list is keyed by id
		raise HTTPException(status_code=422, detail="Record has no 'id'")
	store = _selection(category)
	ok, reason = store.add(record)
	if not ok:  # list is full
		raise HTTPException(status_code=409, detail=reason)
	return {"limit": store.limit(), "items": store.items()}


@app.delete("/selection/{category}/{item_id}")
async def remove_from_selection(category: str, item_id: int):
	store = _selection(category)
	store.remove(item_id)
	return {"limit": store.limit(), "items": store.items()}

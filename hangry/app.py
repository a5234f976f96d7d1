from __future__ import annotations

import os
import time

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from starlette.middleware.sessions import SessionMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import EventStore
from .directory.client import DirectoryQuery, DirectoryService
from .duel.models import DuelChoiceRequest, DuelStartRequest, DuelState
from .duel.tournament import TournamentError, TournamentPhase
from .geolocation.provider import GeolocationProvider, IPGeolocationProvider, resolve_location
from .llm.config import DEFAULT_LLM_CONFIG, LLMConfig
from .llm.groq_client import explain_recommendations
from .recipes.client import RecipeService
from .recipes.models import RecipeResponse
from .recommendations.geo import annotate_distances, miles_to_meters
from .recommendations.models import (
    AffinityProfile,
    Coordinates,
    RecommendationRequest,
    RecommendationResponse,
    SortKey,
)
from .recommendations.options import build_options
from .recommendations.preferences import analyze_decisions, approved_candidates
from .recommendations.scoring import rank_candidates
from .recommendations.sorting import sort_candidates
from .session.models import (
    DecisionRequest,
    DecisionResponse,
    DeckState,
    OptionsResponse,
    SearchRequest,
    SearchResponse,
)
from .session.store import SessionContext, SessionStore

router = APIRouter()


# ── Dependencies ─────────────────────────────────────────────────────────


def get_session(request: Request) -> SessionContext:
    """Resolve (or open) the caller's session from the signed cookie."""
    store: SessionStore = request.app.state.sessions
    session_id, context = store.get_or_create(request.session.get("sid"))
    request.session["sid"] = session_id
    return context


def get_events(request: Request) -> EventStore:
    return request.app.state.events


def _approved_count(session: SessionContext) -> int:
    return len(approved_candidates(session.decisions))


# ── Public endpoints ─────────────────────────────────────────────────────


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


# ── Search & swiping ─────────────────────────────────────────────────────


@router.post("/search", response_model=SearchResponse)
async def search(
    body: SearchRequest,
    request: Request,
    session: SessionContext = Depends(get_session),
    events: EventStore = Depends(get_events),
) -> SearchResponse:
    start_time = time.time()
    generation = session.begin_search()

    origin: Coordinates | None = None
    notice: str | None = None
    if body.latitude is not None and body.longitude is not None:
        origin = Coordinates(latitude=body.latitude, longitude=body.longitude)
    elif body.use_ip_location:
        client_ip = request.client.host if request.client else None
        resolution = await resolve_location(
            request.app.state.geolocator,
            client_ip,
            timeout=request.app.state.geolocation_timeout,
        )
        origin = resolution.coordinates
        notice = resolution.notice

    if body.max_distance_miles:
        max_distance: float | None = miles_to_meters(body.max_distance_miles)
    elif body.radius_meters:
        max_distance = float(body.radius_meters)
    else:
        max_distance = None

    directory: DirectoryService = request.app.state.directory
    radius = body.radius_meters or (int(max_distance) if max_distance else None)
    query = DirectoryQuery(
        location=body.location,
        coordinates=origin,
        radius_meters=radius,
        excluded_categories=body.excluded_categories,
        open_now=body.open_now,
        price_tiers=body.price_tiers,
    )
    result = await directory.search(query)

    location_label = None if origin else (body.location or directory.config.default_location)
    pool = annotate_distances(result.candidates, origin)
    if not session.replace_pool(generation, pool, origin, location_label, max_distance):
        raise HTTPException(status_code=409, detail="Search superseded by a newer request")

    elapsed_ms = round((time.time() - start_time) * 1000, 1)
    events.record("search", {
        "location": location_label,
        "used_coordinates": origin is not None,
        "source": result.source,
        "total_candidates": len(pool),
        "response_time_ms": elapsed_ms,
        "cache_hit": result.cache_hit,
    })

    return SearchResponse(
        total_candidates=len(pool),
        source=result.source,
        used_coordinates=origin is not None,
        location=location_label,
        max_distance=max_distance,
        notice=notice,
    )


@router.get("/deck", response_model=DeckState)
def deck(session: SessionContext = Depends(get_session)) -> DeckState:
    return DeckState(
        current=session.current_card(),
        position=session.cursor,
        remaining=max(0, len(session.pool) - session.cursor),
        approved_count=_approved_count(session),
    )


@router.post("/decisions", response_model=DecisionResponse)
def record_decision(
    body: DecisionRequest,
    session: SessionContext = Depends(get_session),
    events: EventStore = Depends(get_events),
) -> DecisionResponse:
    try:
        decision = session.record_decision(body.candidate_id, body.status)
    except KeyError:
        raise HTTPException(status_code=404, detail="Candidate is not in the current pool")

    events.record("decision", {
        "candidate_id": decision.candidate_id,
        "status": decision.status.value,
        "categories": decision.candidate.categories,
    })
    return DecisionResponse(
        status="recorded",
        total_decisions=len(session.decisions),
        approved_count=_approved_count(session),
        next_candidate=session.current_card(),
    )


@router.get("/profile", response_model=AffinityProfile)
def profile(session: SessionContext = Depends(get_session)) -> AffinityProfile:
    return analyze_decisions(session.decisions)


@router.post("/session/reset")
def reset_session(session: SessionContext = Depends(get_session)) -> dict:
    session.reset()
    return {"status": "reset"}


# ── Recommendations & options ────────────────────────────────────────────


@router.post("/recommendations", response_model=RecommendationResponse)
def recommendations(
    body: RecommendationRequest,
    request: Request,
    session: SessionContext = Depends(get_session),
) -> RecommendationResponse:
    max_distance = body.max_distance if body.max_distance is not None else session.max_distance
    ranked = rank_candidates(session.pool, session.decisions, max_distance)

    by_id = {item.candidate.id: item for item in ranked}
    ordered = sort_candidates([item.candidate for item in ranked], body.sort)
    items = [by_id[c.id] for c in ordered]
    if body.limit:
        items = items[: body.limit]

    if body.explain:
        reasons = explain_recommendations(
            analyze_decisions(session.decisions),
            items,
            config=request.app.state.llm_config,
        )
        items = [item.model_copy(update={"reason": reasons.get(item.candidate.id)}) for item in items]

    return RecommendationResponse(
        recommendations=items,
        total_candidates=len(session.pool),
        sort=body.sort,
    )


@router.get("/options", response_model=OptionsResponse)
def options(
    sort: SortKey = SortKey.default,
    session: SessionContext = Depends(get_session),
) -> OptionsResponse:
    listed = build_options(session.pool, session.decisions)
    return OptionsResponse(
        options=sort_candidates(listed, sort),
        approved_count=_approved_count(session),
        sort=sort,
    )


@router.get("/recipes", response_model=RecipeResponse)
async def recipes(
    request: Request,
    query: str = Query(..., min_length=1),
    count: int = Query(default=10, ge=1, le=50),
) -> RecipeResponse:
    service: RecipeService = request.app.state.recipes
    return await service.search(query, count)


@router.get("/options/recipes", response_model=RecipeResponse)
async def option_recipes(
    request: Request,
    session: SessionContext = Depends(get_session),
) -> RecipeResponse:
    service: RecipeService = request.app.state.recipes
    return await service.suggest_for(approved_candidates(session.decisions))


# ── Duel ─────────────────────────────────────────────────────────────────


@router.get("/duel", response_model=DuelState)
def duel_state(session: SessionContext = Depends(get_session)) -> DuelState:
    return DuelState.from_tournament(session.tournament)


@router.post("/duel/start", response_model=DuelState)
def duel_start(
    body: DuelStartRequest,
    session: SessionContext = Depends(get_session),
    events: EventStore = Depends(get_events),
) -> DuelState:
    if body.candidate_ids is not None:
        try:
            candidates = session.lookup(body.candidate_ids)
        except KeyError as exc:
            raise HTTPException(status_code=404, detail=f"Unknown candidate {exc.args[0]!r}")
    else:
        candidates = approved_candidates(session.decisions)

    try:
        session.tournament.start(candidates)
    except TournamentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    events.record("duel_started", {"size": session.tournament.initial_count})
    return DuelState.from_tournament(session.tournament)


@router.post("/duel/choose", response_model=DuelState)
def duel_choose(
    body: DuelChoiceRequest,
    session: SessionContext = Depends(get_session),
    events: EventStore = Depends(get_events),
) -> DuelState:
    tournament = session.tournament
    if tournament.phase is not TournamentPhase.pair_presented:
        raise HTTPException(status_code=409, detail="No duel pair is waiting for a choice")

    try:
        phase = tournament.choose(body.winner_id)
    except TournamentError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if phase is TournamentPhase.finished and tournament.winner is not None:
        events.record("duel_finished", {
            "winner_id": tournament.winner.id,
            "choices": tournament.choices_made,
        })
    return DuelState.from_tournament(tournament)


@router.post("/duel/reset", response_model=DuelState)
def duel_reset(session: SessionContext = Depends(get_session)) -> DuelState:
    session.tournament.reset()
    return DuelState.from_tournament(session.tournament)


# ── Operational endpoints ────────────────────────────────────────────────


@router.get("/analytics")
def analytics(events: EventStore = Depends(get_events)) -> dict:
    return compute_analytics(events.events())


@router.get("/cache/stats")
def cache_stats(request: Request) -> dict:
    return {
        "directory": request.app.state.directory.cache.stats(),
        "recipes": request.app.state.recipes.cache.stats(),
    }


# ── App factory ──────────────────────────────────────────────────────────


def create_app(
    directory: DirectoryService | None = None,
    recipes: RecipeService | None = None,
    geolocator: GeolocationProvider | None = None,
    sessions: SessionStore | None = None,
    llm_config: LLMConfig = DEFAULT_LLM_CONFIG,
    geolocation_timeout: float = 5.0,
) -> FastAPI:
    """Build the API with explicitly constructed collaborators.

    Anything not supplied gets its production default, so tests can swap
    in fixture-backed or mocked services.
    """
    app = FastAPI(title="Hangry Restaurant Picker API", version="1.0.0")
    app.add_middleware(
        SessionMiddleware,
        secret_key=os.environ.get("SESSION_SECRET", "hangry-secret-change-in-production"),
    )
    app.state.directory = directory or DirectoryService()
    app.state.recipes = recipes or RecipeService()
    app.state.geolocator = geolocator or IPGeolocationProvider()
    app.state.sessions = sessions if sessions is not None else SessionStore()
    app.state.events = EventStore()
    app.state.llm_config = llm_config
    app.state.geolocation_timeout = geolocation_timeout
    app.include_router(router)
    return app


app = create_app()

from __future__ import annotations

import json
from http import HTTPStatus
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route

from shared.build_info import APP_VERSION, GIT_COMMIT
from shared.logging import setup_logging
from whist.logic import ledger, roster
from whist.logic.enums import SPECIAL_BID_LABELS, TRUMP_LABELS
from whist.logic.exceptions import GameNotActiveError, LedgerError, PlayerInUseError
from whist.logic.scoring import MAX_BID_LEVEL, MIN_BID_LEVEL, preview_points
from whist.logic.stats import summarize
from whist.logic.types import PointsPreview
from whist.persistence import FileStateRepository, StateImportError, export_state, import_state
from whist.server.service import ScorebookService
from whist.server.settings import WhistServerSettings
from whist.server.types import (
    AddRoundRequest,
    CreateGameNightRequest,
    PlayerNameRequest,
    SetActiveGameRequest,
)

if TYPE_CHECKING:
    from starlette.requests import Request

    from whist.logic.state import AppState
    from whist.persistence.repository import StateRepository

logger = structlog.get_logger()

_TRUTHY = {"1", "true", "yes", "on"}


class RequestBodyError(Exception):
    """Request body is not valid JSON or does not match the request model."""


async def _parse_body[ModelT: BaseModel](request: Request, model: type[ModelT]) -> ModelT:
    raw_body = await request.body()
    if not raw_body.strip():
        body: Any = {}
    else:
        try:
            body = json.loads(raw_body)
        except ValueError as e:
            raise RequestBodyError("Invalid JSON body") from e
    if not isinstance(body, dict):
        raise RequestBodyError("Expected a JSON object")
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise RequestBodyError(str(e)) from e


def _query_int(request: Request, name: str) -> int | None:
    value = request.query_params.get(name)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _service(request: Request) -> ScorebookService:
    return request.app.state.service


def _state_response(state: AppState, status_code: int = HTTPStatus.OK) -> JSONResponse:
    return JSONResponse(state.model_dump(mode="json", by_alias=True), status_code=status_code)


async def _request_body_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=HTTPStatus.UNPROCESSABLE_ENTITY)


async def _ledger_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    if isinstance(exc, GameNotActiveError | PlayerInUseError):
        status = HTTPStatus.CONFLICT
    else:
        status = HTTPStatus.UNPROCESSABLE_ENTITY
    logger.info("transition rejected", error=type(exc).__name__, detail=str(exc))
    return JSONResponse({"error": str(exc), "kind": type(exc).__name__}, status_code=status)


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok", "version": APP_VERSION, "commit": GIT_COMMIT})


async def get_state(request: Request) -> JSONResponse:
    return _state_response(_service(request).state)


async def export_data(request: Request) -> JSONResponse:
    return JSONResponse({"data": export_state(_service(request).state)})


async def import_data(request: Request) -> JSONResponse:
    raw_body = await request.body()
    state = import_state(raw_body.decode("utf-8", errors="replace"))
    return _state_response(await _service(request).replace(state))


async def options(_request: Request) -> JSONResponse:
    return JSONResponse(
        {
            "trump_types": [{"value": t.value, "label": label} for t, label in TRUMP_LABELS.items()],
            "special_bids": [{"value": s.value, "label": label} for s, label in SPECIAL_BID_LABELS.items()],
            "bid_levels": list(range(MIN_BID_LEVEL, MAX_BID_LEVEL + 1)),
        },
    )


async def preview(request: Request) -> JSONResponse:
    """Points preview for a half-filled round form. Never rejects its input."""
    params = request.query_params
    bid_level = _query_int(request, "bid_level")
    if bid_level is None:
        result = PointsPreview(if_made=0, if_failed=0)
    else:
        result = preview_points(
            bid_level,
            params.get("trump_type", ""),
            params.get("special_bid") or None,
            params.get("solo", "").lower() in _TRUTHY,
            _query_int(request, "vip_count"),
        )
    return JSONResponse(result.model_dump(by_alias=True))


async def add_player(request: Request) -> JSONResponse:
    req = await _parse_body(request, PlayerNameRequest)
    state = await _service(request).apply(roster.add_player, req.name)
    return _state_response(state, HTTPStatus.CREATED)


async def rename_player(request: Request) -> JSONResponse:
    req = await _parse_body(request, PlayerNameRequest)
    state = await _service(request).apply(roster.rename_player, request.path_params["player_id"], req.name)
    return _state_response(state)


async def delete_player(request: Request) -> JSONResponse:
    state = await _service(request).apply(roster.delete_player, request.path_params["player_id"])
    return _state_response(state)


async def create_game_night(request: Request) -> JSONResponse:
    req = await _parse_body(request, CreateGameNightRequest)
    state = await _service(request).apply(ledger.create_game_night, req.player_ids)
    return _state_response(state, HTTPStatus.CREATED)


async def set_active_game(request: Request) -> JSONResponse:
    req = await _parse_body(request, SetActiveGameRequest)
    state = await _service(request).apply(ledger.set_active_game, req.game_id)
    return _state_response(state)


async def end_game_night(request: Request) -> JSONResponse:
    state = await _service(request).apply(ledger.end_game_night, request.path_params["game_id"])
    return _state_response(state)


async def delete_game_night(request: Request) -> JSONResponse:
    state = await _service(request).apply(ledger.delete_game_night, request.path_params["game_id"])
    return _state_response(state)


async def add_round(request: Request) -> JSONResponse:
    req = await _parse_body(request, AddRoundRequest)
    state = await _service(request).apply(
        ledger.add_round,
        request.path_params["game_id"],
        req.bidder,
        req.partner,
        req.bid_level,
        req.trump_type,
        req.vip_count,
        req.special_bid,
        req.tricks_won,
    )
    return _state_response(state, HTTPStatus.CREATED)


async def delete_round(request: Request) -> JSONResponse:
    state = await _service(request).apply(
        ledger.delete_round,
        request.path_params["game_id"],
        request.path_params["round_id"],
    )
    return _state_response(state)


async def stats(request: Request) -> JSONResponse:
    return JSONResponse(summarize(_service(request).state).model_dump(mode="json", by_alias=True))


def create_app(
    settings: WhistServerSettings | None = None,
    repository: StateRepository | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = WhistServerSettings()
    if repository is None:
        repository = FileStateRepository(settings.data_file)

    routes = [
        Route("/health", health, methods=["GET"], name="health"),
        Route("/api/state", get_state, methods=["GET"], name="get_state"),
        Route("/api/export", export_data, methods=["GET"], name="export_data"),
        Route("/api/import", import_data, methods=["POST"], name="import_data"),
        Route("/api/options", options, methods=["GET"], name="options"),
        Route("/api/preview", preview, methods=["GET"], name="preview"),
        Route("/api/stats", stats, methods=["GET"], name="stats"),
        Route("/api/players", add_player, methods=["POST"], name="add_player"),
        Route("/api/players/{player_id}", rename_player, methods=["PUT"], name="rename_player"),
        Route("/api/players/{player_id}", delete_player, methods=["DELETE"], name="delete_player"),
        Route("/api/games", create_game_night, methods=["POST"], name="create_game_night"),
        Route("/api/active-game", set_active_game, methods=["POST"], name="set_active_game"),
        Route("/api/games/{game_id}/end", end_game_night, methods=["POST"], name="end_game_night"),
        Route("/api/games/{game_id}", delete_game_night, methods=["DELETE"], name="delete_game_night"),
        Route("/api/games/{game_id}/rounds", add_round, methods=["POST"], name="add_round"),
        Route(
            "/api/games/{game_id}/rounds/{round_id}",
            delete_round,
            methods=["DELETE"],
            name="delete_round",
        ),
    ]

    app = Starlette(
        routes=routes,
        exception_handlers={
            RequestBodyError: _request_body_error_handler,
            StateImportError: _request_body_error_handler,
            LedgerError: _ledger_error_handler,
        },
    )
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type"],
    )

    app.state.settings = settings
    app.state.service = ScorebookService(repository)

    logger.info("whist server ready", data_file=settings.data_file)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """Factory function for uvicorn --factory whist.server.app:get_app."""
    s = WhistServerSettings()
    setup_logging(log_dir=s.log_dir)
    return create_app(settings=s)

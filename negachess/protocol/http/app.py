from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...config import Settings
from ...engine.game import Game, NoMoveAvailable
from ...engine.move import parse_uci, str_to_square
from ...engine.perft import perft as perft_nodes
from ...search.service import SearchService
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)


class CreateGameRequest(BaseModel):
    fen: Optional[str] = Field(default=None, description="Optional starting FEN")


class CreateGameResponse(BaseModel):
    game_id: str
    fen: str


class SetPositionRequest(BaseModel):
    fen: str = Field(..., description="FEN string; placement and optional active colour")


class StateStringRequest(BaseModel):
    state: str = Field(..., min_length=64, max_length=64, description="64-cell snapshot")
    side_to_move: str = Field(default="w", pattern="^[wb]$")


class MoveRequest(BaseModel):
    move: str = Field(..., description="UCI move string, e.g., e2e4")


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1)
    movetime_ms: Optional[int] = Field(default=None, ge=1)


class PerftRequest(BaseModel):
    fen: str
    depth: int = Field(default=1, ge=0, le=5)


class CanMoveResponse(BaseModel):
    from_sq: str
    to_sq: str
    allowed: bool


class GameState(BaseModel):
    game_id: str
    fen: str
    side_to_move: str
    state_string: str
    legal_moves: list[str]
    last_move: Optional[str]
    move_history: list[str]
    winner: Optional[str]
    draw: bool


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    app = FastAPI(title="negachess API", version="0.1.0")

    logging.basicConfig(level=settings.log_level)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, exception_handler)

    store = InMemorySessionStore()
    app.state.settings = settings
    app.state.store = store

    def _depth(requested: Optional[int]) -> int:
        depth = requested or settings.search_depth
        if depth > settings.max_depth:
            raise HTTPException(
                status_code=400, detail=f"depth must be <= {settings.max_depth}"
            )
        return depth

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game(req: Optional[CreateGameRequest] = None) -> CreateGameResponse:
        fen = req.fen if req is not None else None
        try:
            game = Game.from_fen(fen) if fen else Game.new()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid FEN: {e}")
        game_id = store.create(game)
        logger.info("game created", extra={"game_id": game_id})
        return CreateGameResponse(game_id=game_id, fen=game.to_fen())

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _game_state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        try:
            store.set(game_id, Game.from_fen(req.fen))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"invalid FEN: {e}")
        return _game_state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/state-string", response_model=GameState)
    async def set_state_string(game_id: str, req: StateStringRequest) -> GameState:
        _require_game(store, game_id)
        try:
            store.set(game_id, Game.from_state_string(req.state, req.side_to_move))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _game_state(game_id, _require_game(store, game_id))

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            move = parse_uci(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            game.apply_move(move)
        except ValueError:
            raise HTTPException(status_code=400, detail="illegal move")
        return _game_state(game_id, game)

    @app.get("/api/games/{game_id}/can-move", response_model=CanMoveResponse)
    async def can_move(game_id: str, from_sq: str, to_sq: str) -> CanMoveResponse:
        game = _require_game(store, game_id)
        try:
            src, dst = str_to_square(from_sq), str_to_square(to_sq)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return CanMoveResponse(from_sq=from_sq, to_sq=to_sq, allowed=game.can_move(src, dst))

    @app.post("/api/games/{game_id}/search")
    async def search(game_id: str, req: SearchRequest) -> Dict[str, Any]:
        game = _require_game(store, game_id)
        service = SearchService(settings.eval_perspective)
        res = service.find_best_move(game.board, _depth(req.depth), movetime_ms=req.movetime_ms)
        return {
            "best_move": res.best_move.to_uci() if res.has_move else None,
            "score": res.score,
            "nodes": res.nodes,
            "depth": res.depth,
            "time_ms": res.time_ms,
            "completed": res.completed,
        }

    @app.post("/api/games/{game_id}/ai-move", response_model=GameState)
    async def ai_move(game_id: str, req: Optional[SearchRequest] = None) -> GameState:
        game = _require_game(store, game_id)
        depth = _depth(req.depth if req is not None else None)
        movetime_ms = req.movetime_ms if req is not None else None
        try:
            move, res = game.ai_move(depth, movetime_ms, settings.eval_perspective)
        except NoMoveAvailable as e:
            raise HTTPException(status_code=409, detail=str(e))
        logger.info(
            "ai move",
            extra={"game_id": game_id, "move": move.to_uci(), "score": res.score, "nodes": res.nodes},
        )
        return _game_state(game_id, game)

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, Any]:
        try:
            game = Game.from_fen(req.fen)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid FEN")
        return {"nodes": perft_nodes(game.board, req.depth)}

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, str]:
        _require_game(store, game_id)
        store.delete(game_id)
        return {"game_id": game_id, "status": "deleted"}

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.undo_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _game_state(game_id, game)

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _game_state(game_id: str, game: Game) -> GameState:
    history = game.move_history_uci()
    return GameState(
        game_id=game_id,
        fen=game.to_fen(),
        side_to_move=game.side_to_move,
        state_string=game.state_string(),
        legal_moves=[m.to_uci() for m in game.legal_moves()],
        last_move=history[-1] if history else None,
        move_history=history,
        winner=game.winner(),
        draw=game.is_draw(),
    )

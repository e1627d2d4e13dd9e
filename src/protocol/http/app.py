from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, Field

from .error import (
    engine_error_handler,
    exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from .logging_middleware import RequestIDLoggingMiddleware
from ...engine.board import INITIAL_LAYOUT, Board, IllegalMoveError, MoveLimitError
from ...engine.game import Game
from ...engine.move import parse_move
from ...engine.perft import perft as perft_nodes
from ...engine.piece import Piece
from ...search.service import SearchService
from .session import InMemorySessionStore


logger = logging.getLogger(__name__)

MAX_HTTP_DEPTH = 8


class CreateGameResponse(BaseModel):
    game_id: str
    layout: List[str]
    turn: str


class SetPositionRequest(BaseModel):
    layout: List[str] = Field(..., description="8 rows of w/b/-, top row first")
    turn: str = Field(default="black", description="Side to move: white or black")


class MoveRequest(BaseModel):
    move: str = Field(..., description="Move string, e.g., c1-c3")


class MoveLimitRequest(BaseModel):
    limit: int = Field(..., ge=1, description="Moves per side before a tie")


class SearchRequest(BaseModel):
    depth: Optional[int] = Field(default=None, ge=1, le=MAX_HTTP_DEPTH)


class PerftRequest(BaseModel):
    layout: Optional[List[str]] = None
    turn: str = "black"
    depth: int = Field(default=1, ge=0, le=4)


class GameState(BaseModel):
    game_id: str
    layout: List[str]
    turn: str
    legal_moves: list[str]
    winner: Optional[str]
    game_over: bool
    moves_made: int
    move_limit: int
    last_move: Optional[str]
    move_history: list[str]


def create_app() -> FastAPI:
    app = FastAPI(title="Lines of Action Engine API", version="0.1.0")

    # Basic logging setup
    logging.basicConfig(level=logging.INFO)

    # Middleware & error handling
    app.add_middleware(RequestIDLoggingMiddleware)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(IllegalMoveError, engine_error_handler)
    app.add_exception_handler(MoveLimitError, engine_error_handler)
    app.add_exception_handler(Exception, exception_handler)

    # In-memory session store for games
    store = InMemorySessionStore()

    @app.get("/healthz")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @app.post("/api/games", response_model=CreateGameResponse)
    async def create_game() -> CreateGameResponse:
        game_id = store.create(Game.new())
        game = _require_game(store, game_id)
        return CreateGameResponse(
            game_id=game_id, layout=game.layout(), turn=game.turn().full_name()
        )

    @app.get("/api/games/{game_id}/state", response_model=GameState)
    async def get_state(game_id: str) -> GameState:
        return _state(game_id, _require_game(store, game_id))

    @app.delete("/api/games/{game_id}")
    async def delete_game(game_id: str) -> Dict[str, bool]:
        if not store.delete(game_id):
            raise HTTPException(status_code=404, detail="game not found")
        return {"deleted": True}

    @app.post("/api/games/{game_id}/position", response_model=GameState)
    async def set_position(game_id: str, req: SetPositionRequest) -> GameState:
        _require_game(store, game_id)
        turn = _parse_side(req.turn)
        try:
            game = Game.from_layout(req.layout, turn)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid layout")
        store.replace(game_id, game)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/move", response_model=GameState)
    async def make_move(game_id: str, req: MoveRequest) -> GameState:
        game = _require_game(store, game_id)
        try:
            move = parse_move(req.move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        try:
            played = game.apply_move(move)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        logger.info("move played", extra={"game_id": game_id, "move": played.to_str()})
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/undo", response_model=GameState)
    async def undo(game_id: str) -> GameState:
        game = _require_game(store, game_id)
        try:
            game.undo_move()
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/move-limit", response_model=GameState)
    async def set_move_limit(game_id: str, req: MoveLimitRequest) -> GameState:
        game = _require_game(store, game_id)
        # MoveLimitError is rendered as 409 by the engine error handler
        game.set_move_limit(req.limit)
        return _state(game_id, game)

    @app.post("/api/games/{game_id}/search")
    async def search(game_id: str, req: SearchRequest) -> Dict[str, Any]:
        game = _require_game(store, game_id)
        if game.game_over():
            raise HTTPException(status_code=409, detail="game is over")
        service = SearchService()
        res = service.search(game.board, depth=req.depth or 1)
        return {
            "best_move": res.best_move.to_str() if res.best_move else None,
            "score": res.score,
            "nodes": res.nodes,
            "depth": res.depth,
            "time_ms": res.time_ms,
        }

    @app.post("/api/games/{game_id}/engine-move", response_model=GameState)
    async def engine_move(game_id: str, req: SearchRequest) -> GameState:
        game = _require_game(store, game_id)
        if game.game_over():
            raise HTTPException(status_code=409, detail="game is over")
        res = SearchService().search(game.board, depth=req.depth or 1)
        if res.best_move is None:
            raise HTTPException(status_code=409, detail="no legal moves")
        played = game.apply_move(res.best_move)
        logger.info(
            "engine move played",
            extra={"game_id": game_id, "move": played.to_str(), "score": res.score},
        )
        return _state(game_id, game)

    @app.post("/api/perft")
    async def perft(req: PerftRequest) -> Dict[str, Any]:
        turn = _parse_side(req.turn)
        rows = req.layout if req.layout is not None else INITIAL_LAYOUT
        try:
            board = Board.from_layout(rows, turn)
        except ValueError:
            raise HTTPException(status_code=400, detail="invalid layout")
        nodes = perft_nodes(board, req.depth)
        return {"nodes": nodes}

    return app


def _require_game(store: InMemorySessionStore, game_id: str) -> Game:
    game = store.get(game_id)
    if game is None:
        raise HTTPException(status_code=404, detail="game not found")
    return game


def _parse_side(name: str) -> Piece:
    side = name.strip().lower()
    if side in ("white", "w"):
        return Piece.WHITE
    if side in ("black", "b"):
        return Piece.BLACK
    raise HTTPException(status_code=400, detail=f"invalid side: {name!r}")


def _winner_name(winner: Optional[Piece]) -> Optional[str]:
    if winner is None:
        return None
    if winner is Piece.EMPTY:
        return "tie"
    return winner.full_name()


def _state(game_id: str, game: Game) -> GameState:
    history = game.move_history_str()
    return GameState(
        game_id=game_id,
        layout=game.layout(),
        turn=game.turn().full_name(),
        legal_moves=[m.to_str() for m in game.legal_moves()],
        winner=_winner_name(game.winner()),
        game_over=game.game_over(),
        moves_made=game.board.moves_made(),
        move_limit=game.board.move_limit,
        last_move=history[-1] if history else None,
        move_history=history,
    )


# Default app for non-factory servers
app = create_app()

"""HTTP front for the engine: the input layer posts requests, reads snapshots."""

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from chessgame.config import Settings
from chessgame.difficulty import DIFFICULTY_PROFILES
from chessgame.manager import GameManager

settings = Settings()
games = GameManager(settings)

app = FastAPI(title="Voice Chess")


# --- Request/Response models ---

class NewGameRequest(BaseModel):
    difficulty: str | None = None


class MoveRequest(BaseModel):
    session_id: str
    move: str


class MoveToSquareRequest(BaseModel):
    session_id: str
    square: str
    piece: str | None = None


class CastleRequest(BaseModel):
    session_id: str
    side: str = "kingside"


class PromoteRequest(BaseModel):
    session_id: str
    piece: str = "queen"


class SessionRequest(BaseModel):
    session_id: str


class ResetRequest(BaseModel):
    session_id: str
    difficulty: str | None = None


def _call(fn, *args):
    try:
        return fn(*args)
    except KeyError:
        raise HTTPException(status_code=404, detail="Session not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# --- Endpoints ---

@app.get("/api/health")
async def health():
    return {"status": "ok"}


@app.get("/api/difficulties")
async def difficulties():
    return [
        {"name": p.name, "title": p.title, "subtitle": p.subtitle}
        for p in DIFFICULTY_PROFILES.values()
    ]


@app.post("/api/game/new")
async def new_game(req: NewGameRequest | None = None):
    difficulty = req.difficulty if req else None
    session_id, state = games.new_game(difficulty)
    return {"session_id": session_id, "state": state}


@app.get("/api/game/{session_id}")
async def game_state(session_id: str):
    game = games.get_game(session_id)
    if game is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return games.state(game)


@app.post("/api/game/move")
async def game_move(req: MoveRequest):
    return _call(games.make_move, req.session_id, req.move)


@app.post("/api/game/move-to")
async def game_move_to(req: MoveToSquareRequest):
    return _call(games.move_to_square, req.session_id, req.square, req.piece)


@app.post("/api/game/castle")
async def game_castle(req: CastleRequest):
    return _call(games.castle, req.session_id, req.side)


@app.post("/api/game/promote")
async def game_promote(req: PromoteRequest):
    return _call(games.promote, req.session_id, req.piece)


@app.post("/api/game/undo")
async def game_undo(req: SessionRequest):
    return _call(games.undo, req.session_id)


@app.post("/api/game/reset")
async def game_reset(req: ResetRequest):
    return _call(games.reset, req.session_id, req.difficulty)

"""FastAPI-powered web UI for playing tic-tac-toe in the browser."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Tuple

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ConfigDict, Field

from .game import EMPTY, TicTacToeGame

logger = logging.getLogger(__name__)


@dataclass
class GameSession:
    """Container for one hot-seat game shared by two players at one screen."""

    game: TicTacToeGame
    updated_at: float = field(default_factory=lambda: time.time())
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)


SESSIONS: Dict[str, GameSession] = {}
SESSION_LOCK = threading.Lock()
app = FastAPI(title="Tic Tac Toe", description="Local two-player classic on a 3x3 grid")


SESSION_TTL_SECONDS = 60 * 30  # 30 minutes


class MoveRequest(BaseModel):
    """Request payload for marking a cell on an existing game."""

    model_config = ConfigDict(populate_by_name=True)

    cell_index: int = Field(alias="cellIndex", ge=0, le=8)


def _cleanup_sessions() -> None:
    """Drop sessions nobody has touched for ``SESSION_TTL_SECONDS``."""

    now = time.time()
    expired = [
        game_id
        for game_id, session in list(SESSIONS.items())
        if now - session.updated_at >= SESSION_TTL_SECONDS
    ]
    for game_id in expired:
        SESSIONS.pop(game_id, None)
    if expired:
        logger.info("Evicted %d idle game(s)", len(expired))


def _create_session() -> Tuple[str, GameSession]:
    """Create a new game session and register it for later access."""

    session = GameSession(game=TicTacToeGame())

    def touch(_: TicTacToeGame) -> None:
        session.updated_at = time.time()

    session.game.subscribe(touch)
    session_id = uuid.uuid4().hex
    with SESSION_LOCK:
        _cleanup_sessions()
        SESSIONS[session_id] = session
    logger.info("Started game %s", session_id)
    return session_id, session


def _get_session(game_id: str) -> GameSession:
    try:
        return SESSIONS[game_id]
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found") from exc


def _status_text(game: TicTacToeGame) -> str:
    status = game.status
    if status.winner:
        return f"Winner: {status.winner}"
    if status.is_over:
        return "It’s a draw!"
    return f"Turn: {game.current_player}"


def _serialize_game(game_id: str, game: TicTacToeGame) -> Dict[str, object]:
    status = game.status
    return {
        "id": game_id,
        "board": [c if c != EMPTY else "" for c in game.cells],
        "currentPlayer": game.current_player,
        "status": status.state,
        "winner": status.winner,
        "winningLine": list(status.line) if status.line else None,
        "statusText": _status_text(game),
        "availableMoves": game.available_moves(),
    }


def _serialize_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        return _serialize_game(game_id, session.game)


def _apply_player_move(
    game_id: str, session: GameSession, cell_index: int
) -> Dict[str, object]:
    with session.lock:
        game = session.game
        player = game.current_player
        accepted = game.play_move(cell_index)
        if not accepted:
            logger.debug("Ignored move by %s on cell %d in %s", player, cell_index, game_id)
        elif game.status.is_over:
            logger.info("Game %s finished: %s", game_id, _status_text(game))
        state = _serialize_game(game_id, game)
    state["accepted"] = accepted
    return state


def _restart_session(game_id: str, session: GameSession) -> Dict[str, object]:
    with session.lock:
        session.game.reset()
        logger.info("Restarted game %s", game_id)
        return _serialize_game(game_id, session.game)


@app.post("/api/game")
def create_game() -> Dict[str, object]:
    game_id, session = _create_session()
    return _serialize_session(game_id, session)


@app.get("/api/game/{game_id}")
def get_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _serialize_session(game_id, session)


@app.post("/api/game/{game_id}/move")
def make_move(game_id: str, request: MoveRequest) -> Dict[str, object]:
    session = _get_session(game_id)
    return _apply_player_move(game_id, session, request.cell_index)


@app.post("/api/game/{game_id}/restart")
def restart_game(game_id: str) -> Dict[str, object]:
    session = _get_session(game_id)
    return _restart_session(game_id, session)


@app.get("/", response_class=HTMLResponse)
def index() -> str:
    return HTML_PAGE


HTML_PAGE = """<!DOCTYPE html>
<html lang=\"en\" data-theme=\"light\">
  <head>
    <meta charset=\"utf-8\" />
    <meta name=\"viewport\" content=\"width=device-width, initial-scale=1\" />
    <title>Tic Tac Toe</title>
    <link rel=\"preconnect\" href=\"https://fonts.googleapis.com\" />
    <link rel=\"preconnect\" href=\"https://fonts.gstatic.com\" crossorigin />
    <link
      href=\"https://fonts.googleapis.com/css2?family=Poppins:wght@400;500;600;700&display=swap\"
      rel=\"stylesheet\"
    />
    <style>
      :root {
        color-scheme: light;
        font-family: 'Poppins', system-ui, -apple-system, BlinkMacSystemFont, \"Segoe UI\", sans-serif;
        font-weight: 400;
        --bg: radial-gradient(circle at top, #f2f5ff, #dbe0ff 40%, #cfd8ff 70%);
        --card: rgba(255, 255, 255, 0.92);
        --text: #13203a;
        --muted: rgba(19, 32, 58, 0.7);
        --cell: #f4f6ff;
        --cell-border: rgba(58, 102, 255, 0.25);
        --x: #3a66ff;
        --o: #ff5a7a;
        --win: rgba(255, 204, 77, 0.45);
        --accent: #3a66ff;
      }
      [data-theme='dark'] {
        color-scheme: dark;
        --bg: radial-gradient(circle at top, #1d2540, #121829 50%, #0b0f1c 80%);
        --card: rgba(24, 31, 52, 0.94);
        --text: #e7ecff;
        --muted: rgba(231, 236, 255, 0.7);
        --cell: #1f2844;
        --cell-border: rgba(130, 160, 255, 0.3);
        --x: #8aa6ff;
        --o: #ff8fa6;
        --win: rgba(255, 204, 77, 0.3);
        --accent: #6d8cff;
      }
      * {
        box-sizing: border-box;
      }
      body {
        margin: 0;
        background: var(--bg);
        min-height: 100vh;
        display: flex;
        justify-content: center;
        align-items: flex-start;
        padding: 2rem 1rem 3rem;
        color: var(--text);
        transition: background 0.4s ease, color 0.4s ease;
      }
      main {
        width: min(460px, 100%);
        position: relative;
      }
      .theme-toggle {
        position: absolute;
        top: 0;
        right: 0;
        border: 1px solid var(--cell-border);
        background: var(--card);
        color: var(--text);
        border-radius: 12px;
        padding: 0.4rem 0.8rem;
        font: inherit;
        cursor: pointer;
      }
      .card {
        margin-top: 3rem;
        background: var(--card);
        border-radius: 18px;
        box-shadow: 0 20px 40px rgba(34, 47, 79, 0.16);
        padding: clamp(1.5rem, 4vw, 2.5rem);
      }
      h1 {
        margin: 0 0 0.35rem;
        font-size: clamp(1.8rem, 2.4vw + 1.2rem, 2.4rem);
        text-align: center;
        letter-spacing: 0.06em;
      }
      .tagline {
        text-align: center;
        margin: 0 0 1.5rem;
        color: var(--muted);
        font-weight: 500;
      }
      #status {
        text-align: center;
        font-weight: 600;
        font-size: 1.15rem;
        margin-bottom: 1.25rem;
        min-height: 1.6em;
      }
      #status.is-win {
        color: var(--accent);
      }
      #status.is-draw {
        color: var(--muted);
      }
      .board {
        display: grid;
        grid-template-columns: repeat(3, 1fr);
        gap: 0.6rem;
      }
      .cell {
        aspect-ratio: 1 / 1;
        border-radius: 14px;
        border: 1px solid var(--cell-border);
        background: var(--cell);
        font: inherit;
        font-size: clamp(2rem, 8vw, 3rem);
        font-weight: 700;
        cursor: pointer;
        transition: transform 0.1s ease, background 0.2s ease;
      }
      .cell:not(:disabled):hover {
        transform: translateY(-2px);
      }
      .cell:disabled {
        cursor: default;
      }
      .cell.is-x {
        color: var(--x);
      }
      .cell.is-o {
        color: var(--o);
      }
      .cell.is-winning {
        background: var(--win);
      }
      .controls {
        display: flex;
        justify-content: center;
        margin-top: 1.5rem;
      }
      .controls button {
        border: none;
        border-radius: 12px;
        padding: 0.6rem 1.4rem;
        font: inherit;
        font-weight: 600;
        color: #fff;
        background: var(--accent);
        cursor: pointer;
      }
      #message {
        text-align: center;
        color: var(--o);
        min-height: 1.2em;
        margin-top: 0.75rem;
      }
    </style>
  </head>
  <body>
    <main aria-label=\"Tic Tac Toe\">
      <button id=\"theme-toggle\" class=\"theme-toggle\" type=\"button\"></button>
      <section class=\"card\" aria-label=\"Game container\">
        <h1>Tic Tac Toe</h1>
        <p class=\"tagline\">Local two-player classic on a 3×3 grid</p>
        <div id=\"status\" role=\"status\" aria-live=\"polite\">Setting up your game…</div>
        <div id=\"board\" class=\"board\" role=\"grid\" aria-label=\"Tic Tac Toe board\"></div>
        <div class=\"controls\">
          <button id=\"restart\" type=\"button\">Restart</button>
        </div>
        <div id=\"message\"></div>
      </section>
    </main>
    <script>
      const boardContainer = document.getElementById('board');
      const statusEl = document.getElementById('status');
      const messageEl = document.getElementById('message');
      const restartButton = document.getElementById('restart');
      const themeToggle = document.getElementById('theme-toggle');

      let theme = 'light';
      let gameId = null;
      let gameState = null;
      let isRequestPending = false;

      function applyTheme() {
        document.documentElement.setAttribute('data-theme', theme);
        const next = theme === 'light' ? 'dark' : 'light';
        themeToggle.setAttribute('aria-label', `Switch to ${next} mode`);
        themeToggle.textContent = theme === 'light' ? '🌙 Dark' : '☀️ Light';
      }

      function toggleTheme() {
        theme = theme === 'light' ? 'dark' : 'light';
        applyTheme();
      }

      async function request(url, options = {}) {
        const response = await fetch(url, {
          headers: { 'Content-Type': 'application/json' },
          ...options,
        });
        if (!response.ok) {
          const payload = await response.json().catch(() => ({}));
          throw new Error(payload?.detail || 'Request failed');
        }
        return response.json();
      }

      async function startGame() {
        isRequestPending = true;
        try {
          setState(await request('/api/game', { method: 'POST' }));
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function sendMove(cellIndex) {
        if (!gameState || gameState.status !== 'playing' || isRequestPending) {
          return;
        }
        if (gameState.board[cellIndex]) {
          return;
        }
        isRequestPending = true;
        try {
          setState(
            await request(`/api/game/${gameId}/move`, {
              method: 'POST',
              body: JSON.stringify({ cellIndex }),
            })
          );
        } catch (error) {
          messageEl.textContent = error.message || 'Network error. Please try again.';
        } finally {
          isRequestPending = false;
        }
      }

      async function restartGame() {
        if (isRequestPending) return;
        if (!gameId) {
          await startGame();
          return;
        }
        isRequestPending = true;
        try {
          setState(await request(`/api/game/${gameId}/restart`, { method: 'POST' }));
        } catch (error) {
          isRequestPending = false;
          await startGame();
        } finally {
          isRequestPending = false;
        }
      }

      function setState(data) {
        gameId = data.id;
        gameState = data;
        messageEl.textContent = '';
        renderBoard();
        updateStatus();
      }

      function renderBoard() {
        boardContainer.innerHTML = '';
        if (!gameState) return;
        const winningLine = new Set(gameState.winningLine || []);
        gameState.board.forEach((value, index) => {
          const cellButton = document.createElement('button');
          cellButton.type = 'button';
          cellButton.classList.add('cell');
          cellButton.setAttribute('role', 'gridcell');
          if (value === 'X') cellButton.classList.add('is-x');
          if (value === 'O') cellButton.classList.add('is-o');
          if (winningLine.has(index)) cellButton.classList.add('is-winning');
          cellButton.setAttribute(
            'aria-label',
            `Cell ${index + 1}${value ? `, ${value}` : ''}`
          );
          const mark = document.createElement('span');
          mark.setAttribute('aria-hidden', 'true');
          mark.textContent = value || '';
          cellButton.appendChild(mark);
          cellButton.disabled = Boolean(value) || gameState.status !== 'playing';
          cellButton.addEventListener('click', () => sendMove(index));
          boardContainer.appendChild(cellButton);
        });
      }

      function updateStatus() {
        statusEl.classList.remove('is-win', 'is-draw');
        if (!gameState) {
          statusEl.textContent = 'Setting up your game…';
          return;
        }
        if (gameState.status === 'win') statusEl.classList.add('is-win');
        if (gameState.status === 'draw') statusEl.classList.add('is-draw');
        statusEl.textContent = gameState.statusText;
      }

      themeToggle.addEventListener('click', toggleTheme);
      restartButton.addEventListener('click', restartGame);

      applyTheme();
      startGame();
    </script>
  </body>
</html>
"""

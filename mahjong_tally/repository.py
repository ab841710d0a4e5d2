from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Protocol

from mahjong_tally.config import Settings
from mahjong_tally.gcs_game_store import GCSGameRepository
from mahjong_tally.schemas import Game

logger = logging.getLogger(__name__)


class GameRepository(Protocol):
    def load(self, game_id: str) -> Game | None: ...

    def save(self, game: Game) -> None: ...

    def delete(self, game_id: str) -> bool: ...

    def list(self) -> list[Game]: ...


def _newest_first(games) -> list[Game]:
    return sorted(games, key=lambda game: game.created_at, reverse=True)


class InMemoryGameRepository:
    def __init__(self) -> None:
        self._items: dict[str, Game] = {}
        self._lock = Lock()

    def load(self, game_id: str) -> Game | None:
        with self._lock:
            return self._items.get(game_id)

    def save(self, game: Game) -> None:
        with self._lock:
            self._items[game.id] = game

    def delete(self, game_id: str) -> bool:
        with self._lock:
            return self._items.pop(game_id, None) is not None

    def list(self) -> list[Game]:
        with self._lock:
            return _newest_first(self._items.values())


class JsonFileGameRepository:
    """All games as one JSON list in a single file. Last writer wins."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._lock = Lock()

    def _read(self) -> dict[str, Game]:
        if not self._path.exists():
            return {}
        raw = json.loads(self._path.read_text(encoding="utf-8") or "[]")
        games = (Game.model_validate(item) for item in raw)
        return {game.id: game for game in games}

    def _write(self, games: dict[str, Game]) -> None:
        payload = [game.model_dump(mode="json", by_alias=True) for game in games.values()]
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f"{self._path.name}.tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def load(self, game_id: str) -> Game | None:
        with self._lock:
            return self._read().get(game_id)

    def save(self, game: Game) -> None:
        with self._lock:
            games = self._read()
            games[game.id] = game
            self._write(games)

    def delete(self, game_id: str) -> bool:
        with self._lock:
            games = self._read()
            if games.pop(game_id, None) is None:
                return False
            self._write(games)
            return True

    def list(self) -> list[Game]:
        with self._lock:
            return _newest_first(self._read().values())


def build_repository(config: Settings) -> GameRepository:
    logger.info("using %s game storage", config.storage_backend)
    if config.storage_backend == "file":
        return JsonFileGameRepository(config.games_file)
    if config.storage_backend == "gcs":
        return GCSGameRepository(bucket_name=config.gcs_bucket_name, prefix=config.gcs_games_prefix)
    return InMemoryGameRepository()

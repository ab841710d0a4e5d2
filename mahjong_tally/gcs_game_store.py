from __future__ import annotations

import json
import logging

from google.cloud import storage

from mahjong_tally.config import settings
from mahjong_tally.schemas import Game

logger = logging.getLogger(__name__)


class GCSGameRepository:
    """Stores each game as ``<prefix>/<game id>.json`` in a GCS bucket."""

    def __init__(self, bucket_name: str | None = None, prefix: str | None = None) -> None:
        self.bucket_name = bucket_name or settings.gcs_bucket_name
        self.prefix = (prefix or settings.gcs_games_prefix).strip("/")
        self._client: storage.Client | None = None

    def _get_client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def _bucket(self) -> storage.Bucket:
        if not self.bucket_name:
            raise ValueError("GCS bucket is not configured")
        return self._get_client().bucket(self.bucket_name)

    def _object_name(self, game_id: str) -> str:
        return f"{self.prefix}/{game_id}.json"

    def load(self, game_id: str) -> Game | None:
        blob = self._bucket().blob(self._object_name(game_id))
        if not blob.exists():
            return None
        return Game.model_validate(json.loads(blob.download_as_text()))

    def save(self, game: Game) -> None:
        data = json.dumps(game.model_dump(mode="json", by_alias=True), ensure_ascii=False)
        blob = self._bucket().blob(self._object_name(game.id))
        blob.upload_from_string(data, content_type="application/json")
        logger.info("saved game %s to gs://%s/%s", game.id, self.bucket_name, blob.name)

    def delete(self, game_id: str) -> bool:
        blob = self._bucket().blob(self._object_name(game_id))
        if not blob.exists():
            return False
        blob.delete()
        return True

    def list(self) -> list[Game]:
        games = [
            Game.model_validate(json.loads(blob.download_as_text()))
            for blob in self._get_client().list_blobs(self._bucket(), prefix=f"{self.prefix}/")
            if blob.name.endswith(".json")
        ]
        return sorted(games, key=lambda game: game.created_at, reverse=True)

# backend/tracks/services.py
import logging
import random
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from fastapi import HTTPException
from pymongo import ReturnDocument

from config import settings
from models.track import TrackCreate
from tracks.pipelines import LIST_PROJECTION, build_search_pipeline

logger = logging.getLogger("tracks.services")

# Rango de reproducciones iniciales (valor de demo, no es regla de negocio)
MIN_INITIAL_PLAYS = 1000
MAX_INITIAL_PLAYS = 9_999_999


def seed_count_plays() -> int:
    return random.randint(MIN_INITIAL_PLAYS, MAX_INITIAL_PLAYS)


class TrackService:
    """
    Acceso a la colección de tracks, con resolución de autor y álbum.

    Recibe la base de datos (AsyncDatabase de pymongo) y toma de ella las
    colecciones Track, Author y Album. No guarda estado entre peticiones.
    """

    def __init__(self, db):
        self.db = db
        self.tracks = db[settings.TRACK_COLLECTION]
        self.authors = db[settings.AUTHOR_COLLECTION]
        self.albums = db[settings.ALBUM_COLLECTION]

    # ============================================================
    # 🔎 Búsqueda (join -> filtro -> proyección)
    # ============================================================
    async def search(self, search_term: Optional[str] = None) -> List[Dict]:
        cursor = await self.tracks.aggregate(build_search_pipeline(search_term))
        tracks = await cursor.to_list(None)
        logger.debug(f"🔎 search({search_term!r}) -> {len(tracks)} tracks")
        return tracks

    # ============================================================
    # ➕ Crear track
    # ============================================================
    async def create(self, dto: TrackCreate) -> Dict[str, Any]:
        now = datetime.now(timezone.utc)
        track = {
            "poster": dto.poster,
            "title": dto.title,
            "duration": dto.duration,
            "album": ObjectId(dto.album),
            "trackUrl": dto.trackUrl,
            "author": ObjectId(dto.author),
            "countPlays": seed_count_plays(),
            "createdAt": now,
            "updatedAt": now,
            "__v": 0,
        }
        result = await self.tracks.insert_one(track)
        track["_id"] = result.inserted_id
        logger.info(f"✅ Track creado: {dto.title} ({result.inserted_id})")
        return {"track": track}

    # ============================================================
    # ▶️ Reproducción: +1 atómico
    # ============================================================
    async def increment_play_count(self, track_id: str) -> Optional[Dict]:
        updated = await self.tracks.find_one_and_update(
            {"_id": ObjectId(track_id)},
            {
                "$inc": {"countPlays": 1},
                "$set": {"updatedAt": datetime.now(timezone.utc)},
            },
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            logger.info(f"❌ Track no encontrado para sumar reproducción: {track_id}")
        return updated

    # ============================================================
    # 🔥 Más populares / 🆕 más recientes
    # ============================================================
    async def most_popular(self) -> List[Dict]:
        cursor = self.tracks.find({"countPlays": {"$gt": 0}}, LIST_PROJECTION).sort("countPlays", -1)
        return await self._populate(await cursor.to_list(None), "album", "author")

    async def most_recent(self) -> List[Dict]:
        cursor = self.tracks.find({}, LIST_PROJECTION).sort("createdAt", -1)
        return await self._populate(await cursor.to_list(None), "album", "author")

    # ============================================================
    # 👤 Tracks por autor
    # ============================================================
    async def by_author(self, author_id) -> Dict[str, Any]:
        if not author_id:
            raise HTTPException(status_code=404, detail="Missing authorId")

        cursor = self.tracks.find({"author": ObjectId(author_id)}, LIST_PROJECTION)
        data = await cursor.to_list(None)
        # to_list nunca devuelve None; se mantiene la comprobación
        if data is None:
            raise HTTPException(status_code=404, detail="Tracks not found")

        data = await self._populate(data, "album", "author")
        total_plays = sum(track.get("countPlays", 0) for track in data)
        return {"data": data, "totalPlays": total_plays}

    # ============================================================
    # 💿 Tracks por álbumes
    # ============================================================
    async def by_album(self, album_ids: Optional[List]) -> Dict[str, Any]:
        if album_ids is None:
            raise HTTPException(status_code=404, detail="Missing albumIds")

        ids = [ObjectId(album_id) for album_id in album_ids]
        cursor = self.tracks.find({"album": {"$in": ids}})
        data = await cursor.to_list(None)
        if data is None:
            raise HTTPException(status_code=404, detail="Tracks not found")

        data = await self._populate(data, "author", "album")
        total_duration = sum(track.get("duration", 0) for track in data)
        return {"totalDuration": total_duration, "data": data}

    # ============================================================
    # 🔗 Populate: reemplaza la referencia por el documento completo
    # ============================================================
    async def _populate(self, tracks: List[Dict], *paths: str) -> List[Dict]:
        collections = {"author": self.authors, "album": self.albums}
        for path in paths:
            refs = _unique_refs(track.get(path) for track in tracks)
            if not refs:
                continue
            cursor = collections[path].find({"_id": {"$in": refs}})
            by_id = {doc["_id"]: doc for doc in await cursor.to_list(None)}
            for track in tracks:
                if path in track:
                    track[path] = by_id.get(track[path])
        return tracks


def _unique_refs(values: Iterable) -> List:
    return list(dict.fromkeys(value for value in values if value is not None))

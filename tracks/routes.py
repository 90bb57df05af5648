# backend/tracks/routes.py
import logging
from typing import Optional

from bson.errors import InvalidId
from fastapi import APIRouter, Body, Depends, HTTPException, Request

from database.connection import get_music_db
from models.track import AlbumIds, TrackCreate
from tracks.services import TrackService
from tracks.utils import serialize_document

router = APIRouter()
LOG = logging.getLogger("tracks.routes")


def get_track_service(request: Request) -> TrackService:
    # Base abierta en el lifespan; si no existe, el cliente perezoso
    db = getattr(request.app.state, "db", None)
    if db is None:
        db = get_music_db()
    return TrackService(db)

# ============================================================
# 🔎 Listar / buscar tracks
# ============================================================
@router.get("", include_in_schema=False)
@router.get("/", summary="Listar tracks (búsqueda opcional por título, autor o álbum)")
async def list_tracks(searchTerm: Optional[str] = None, service: TrackService = Depends(get_track_service)):
    try:
        return serialize_document(await service.search(searchTerm))
    except Exception as e:
        LOG.exception(f"❌ Error buscando tracks ({searchTerm!r})")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 🔥 Más populares
# ============================================================
@router.get("/most-popular", summary="Tracks más reproducidos")
async def most_popular(service: TrackService = Depends(get_track_service)):
    try:
        return serialize_document(await service.most_popular())
    except Exception as e:
        LOG.exception("❌ Error obteniendo tracks populares")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 🆕 Más recientes
# ============================================================
@router.get("/most-new", summary="Tracks más recientes")
async def most_new(service: TrackService = Depends(get_track_service)):
    try:
        return serialize_document(await service.most_recent())
    except Exception as e:
        LOG.exception("❌ Error obteniendo tracks recientes")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 👤 Tracks por autor
# ============================================================
@router.get("/by-author/{author_id}", summary="Tracks de un autor con total de reproducciones")
async def by_author(author_id: str, service: TrackService = Depends(get_track_service)):
    try:
        return serialize_document(await service.by_author(author_id))
    except HTTPException as e:
        raise e
    except InvalidId:
        raise HTTPException(status_code=400, detail=f"ID de autor inválido: {author_id}")
    except Exception as e:
        LOG.exception(f"❌ Error obteniendo tracks del autor {author_id}")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# 💿 Tracks por álbumes
# ============================================================
@router.post("/by-album", summary="Tracks de uno o varios álbumes con duración total")
async def by_album(payload: AlbumIds = Body(...), service: TrackService = Depends(get_track_service)):
    try:
        return serialize_document(await service.by_album(payload.album_ids))
    except HTTPException as e:
        raise e
    except InvalidId:
        raise HTTPException(status_code=400, detail="Lista de álbumes con IDs inválidos.")
    except Exception as e:
        LOG.exception("❌ Error obteniendo tracks por álbum")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# ➕ Crear track
# ============================================================
@router.post("", include_in_schema=False)
@router.post("/", summary="Agregar nuevo track")
async def add_track(track: TrackCreate, service: TrackService = Depends(get_track_service)):
    try:
        return serialize_document(await service.create(track))
    except InvalidId:
        raise HTTPException(status_code=400, detail="ID de autor o álbum inválido.")
    except Exception as e:
        LOG.exception("❌ Error creando track")
        raise HTTPException(status_code=500, detail=str(e))

# ============================================================
# ▶️ Sumar reproducción
# ============================================================
@router.put("/update-count-opened/{track_id}", summary="Sumar una reproducción al track")
async def update_count_opened(track_id: str, service: TrackService = Depends(get_track_service)):
    try:
        return serialize_document(await service.increment_play_count(track_id))
    except InvalidId:
        raise HTTPException(status_code=400, detail=f"ID de track inválido: {track_id}")
    except Exception as e:
        LOG.exception(f"❌ Error sumando reproducción al track {track_id}")
        raise HTTPException(status_code=500, detail=str(e))

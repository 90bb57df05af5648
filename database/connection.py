# backend/database/connection.py
import logging
from typing import Optional
from urllib.parse import quote_plus

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from config import settings

logger = logging.getLogger("database.connection")

_client: Optional[AsyncMongoClient] = None

# ============================================================
# 🔧 CONSTRUCTOR DE URI
# ============================================================
def build_mongo_uri() -> str:
    if settings.MONGO_URI:
        return settings.MONGO_URI
    host = settings.MONGO_HOST
    port = settings.MONGO_PORT
    if settings.MONGO_USER and settings.MONGO_PASSWORD:
        user = quote_plus(settings.MONGO_USER)
        password = quote_plus(settings.MONGO_PASSWORD)
        return f"mongodb://{user}:{password}@{host}:{port}"
    return f"mongodb://{host}:{port}"

# ============================================================
# 🎵 CLIENTE Y BASE DE DATOS DE MÚSICA
# ============================================================
def get_client() -> AsyncMongoClient:
    """Cliente único por proceso. No abre conexión hasta la primera operación."""
    global _client
    if _client is None:
        _client = AsyncMongoClient(build_mongo_uri(), tz_aware=True)
    return _client


def get_music_db() -> AsyncDatabase:
    return get_client()[settings.MONGO_DB]

# ============================================================
# 🚀 INICIALIZACIÓN Y CIERRE
# ============================================================
async def init_db() -> AsyncDatabase:
    db = get_music_db()
    try:
        await db.command("ping")
        logger.info(f"✅ Conectado a base de música: {settings.MONGO_DB}")
    except Exception as e:
        logger.error(f"❌ Error conectando a MongoDB ({settings.MONGO_DB}): {e}")
        raise e
    return db


async def close_db() -> None:
    global _client
    if _client is not None:
        await _client.close()
        _client = None
        logger.info("🔌 Conexión a MongoDB cerrada.")

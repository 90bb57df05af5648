# backend/tracks/utils.py
from datetime import datetime
from typing import Any

from bson import ObjectId

# ============================================================
# 🔹 Serializador de documentos Mongo
# ============================================================
def serialize_document(value: Any) -> Any:
    """Convierte ObjectId y fechas (también anidados) a tipos JSON serializables."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: serialize_document(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_document(item) for item in value]
    return value

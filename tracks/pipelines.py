# backend/tracks/pipelines.py
from typing import Any, Dict, List, Optional

from config import settings

Stage = Dict[str, Any]

# Campos temporales: sólo existen para filtrar, nunca salen en la respuesta
AUTHOR_JOIN_FIELD = "authorDocs"
ALBUM_JOIN_FIELD = "albumDocs"
FILTER_ONLY_FIELDS = ("authorTitle", "albumTitle", AUTHOR_JOIN_FIELD, ALBUM_JOIN_FIELD)

# Proyección común de los listados con populate
LIST_PROJECTION = {"createdAt": 0, "updatedAt": 0, "__v": 0}

# ============================================================
# 🔹 Etapa 1: vista filtrable (join Track -> Author / Album)
# ============================================================
def build_search_view() -> List[Stage]:
    """
    Une cada track con su autor y su álbum y expone sus títulos en
    `authorTitle` / `albumTitle` para poder filtrar por ellos.
    """
    return [
        {
            "$lookup": {
                "from": settings.AUTHOR_COLLECTION,
                "localField": "author",
                "foreignField": "_id",
                "as": AUTHOR_JOIN_FIELD,
            }
        },
        {
            "$lookup": {
                "from": settings.ALBUM_COLLECTION,
                "localField": "album",
                "foreignField": "_id",
                "as": ALBUM_JOIN_FIELD,
            }
        },
        {
            "$addFields": {
                "authorTitle": f"${AUTHOR_JOIN_FIELD}.title",
                "albumTitle": f"${ALBUM_JOIN_FIELD}.title",
            }
        },
    ]


def build_search_filter(search_term: Optional[str] = None) -> Dict[str, Any]:
    """Filtro OR (regex, sin distinguir mayúsculas) sobre autor, álbum y título."""
    if not search_term:
        return {}
    term = search_term.strip()
    regex = {"$regex": term, "$options": "i"}
    return {
        "$or": [
            {"authorTitle": regex},
            {"albumTitle": regex},
            {"title": regex},
        ]
    }

# ============================================================
# 🔹 Etapa 2: proyección que elimina los campos de filtrado
# ============================================================
def build_search_projection() -> Stage:
    projection = {"__v": 0, "updatedAt": 0}
    projection.update({field: 0 for field in FILTER_ONLY_FIELDS})
    return {"$project": projection}


def build_search_pipeline(search_term: Optional[str] = None) -> List[Stage]:
    return [
        *build_search_view(),
        {"$match": build_search_filter(search_term)},
        build_search_projection(),
        {"$sort": {"createdAt": -1}},
    ]

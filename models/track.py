# backend/models/track.py
from pydantic import BaseModel, Field
from typing import List, Optional

class TrackCreate(BaseModel):
    poster: str
    title: str
    duration: int  # duración en segundos
    album: str  # ObjectId del álbum
    trackUrl: str
    author: str  # ObjectId del autor


class AlbumIds(BaseModel):
    album_ids: Optional[List[str]] = Field(default=None, alias="albumIds")

"""Fixtures compartidos: base Mongo en memoria (mongomock) con la interfaz async de pymongo."""

from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from bson import ObjectId

from config import settings
from tracks.services import TrackService


class AsyncCursor:
    """Envuelve un cursor/lista de mongomock con los métodos async que usa el servicio."""

    def __init__(self, cursor):
        self._cursor = cursor

    def sort(self, key, direction=None):
        self._cursor = self._cursor.sort(key, direction)
        return self

    async def to_list(self, length=None):
        docs = list(self._cursor)
        return docs if length is None else docs[:length]


class AsyncCollection:
    def __init__(self, collection):
        self.sync = collection

    def find(self, *args, **kwargs):
        return AsyncCursor(self.sync.find(*args, **kwargs))

    async def aggregate(self, pipeline):
        return AsyncCursor(self.sync.aggregate(pipeline))

    async def insert_one(self, document):
        return self.sync.insert_one(document)

    async def find_one_and_update(self, *args, **kwargs):
        return self.sync.find_one_and_update(*args, **kwargs)


class AsyncDatabase:
    def __init__(self, database):
        self.sync = database

    def __getitem__(self, name):
        return AsyncCollection(self.sync[name])


@pytest.fixture
def mongo_db():
    return AsyncDatabase(mongomock.MongoClient(tz_aware=True)["musicdb"])


@pytest.fixture
def service(mongo_db):
    return TrackService(mongo_db)


@pytest.fixture
def catalog(mongo_db):
    """
    Siembra dos autores, tres álbumes y cuatro tracks con fechas distintas.
    Devuelve los ids para poder referenciarlos en los tests.
    """
    db = mongo_db.sync
    authors = {
        "beatles": ObjectId(),
        "daft": ObjectId(),
    }
    albums = {
        "abbey": ObjectId(),
        "discovery": ObjectId(),
        "beats": ObjectId(),
    }
    db[settings.AUTHOR_COLLECTION].insert_many([
        {"_id": authors["beatles"], "title": "The Beatles"},
        {"_id": authors["daft"], "title": "Daft Punk"},
    ])
    db[settings.ALBUM_COLLECTION].insert_many([
        {"_id": albums["abbey"], "title": "Abbey Road"},
        {"_id": albums["discovery"], "title": "Discovery"},
        {"_id": albums["beats"], "title": "Street BEATS"},
    ])

    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    tracks = [
        ("Come Together", authors["beatles"], albums["abbey"], 259, 5000, 0),
        ("Something", authors["beatles"], albums["abbey"], 182, 0, 1),
        ("One More Time", authors["daft"], albums["discovery"], 320, 12000, 2),
        ("Heartbeat", authors["daft"], albums["beats"], 200, 700, 3),
    ]
    track_ids = {}
    for title, author, album, duration, plays, days in tracks:
        created = base + timedelta(days=days)
        result = db[settings.TRACK_COLLECTION].insert_one({
            "title": title,
            "poster": f"/uploads/{title}.jpg",
            "duration": duration,
            "trackUrl": f"/uploads/{title}.mp3",
            "countPlays": plays,
            "author": author,
            "album": album,
            "createdAt": created,
            "updatedAt": created,
            "__v": 0,
        })
        track_ids[title] = result.inserted_id

    return {"authors": authors, "albums": albums, "tracks": track_ids}

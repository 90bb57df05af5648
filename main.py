from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from config import settings
from database.connection import init_db, close_db
import logging

from tracks.routes import router as track_router

# =====================================================
# * Configuración de Logging global
# =====================================================
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s"
)
logger = logging.getLogger("main")

# =====================================================
# * Ciclo de vida: conexión a la Base de Datos
# =====================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.db = await init_db()
    logger.info("✅ Base de datos inicializada correctamente y aplicación lista.")
    yield
    await close_db()

# =====================================================
# * Inicialización de la aplicación
# =====================================================
app = FastAPI(
    title=f"{settings.PROJECT_NAME} Backend",
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
)

# =====================================================
# * Configuración CORS
# =====================================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =====================================================
# * Registro de Rutas
# =====================================================
app.include_router(track_router, prefix="/tracks", tags=["Tracks"])
logger.info(" - /tracks -> TrackRouter")

# =====================================================
# * Ruta raíz
# =====================================================
@app.get("/", summary="Ruta raíz del backend")
def root():
    return {
        "message": f"🚀 {settings.PROJECT_NAME} Backend activo",
        "version": settings.VERSION,
        "env": settings.ENV
    }

logger.info(f"🌍 {settings.PROJECT_NAME} backend iniciado en modo '{settings.ENV}'.")

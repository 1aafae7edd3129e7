# main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
# Importamos los routers de la capa de infraestructura
from despachos.infrastructure.api.routers import assets_router, dispatch_router, sellers_router, settlement_router
from despachos.infrastructure.persistence.database import init_db

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(levelname)s - [%(funcName)s] - %(message)s'
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logging.info(f"Backend de logística: {config.API_BASE_URL}")
    yield


app = FastAPI(
    title="API de Despachos y Liquidaciones",
    description="Despacho diario de mercadería y activos a heladeros y liquidación al cierre del día.",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dispatch_router.router)
app.include_router(settlement_router.router)
app.include_router(sellers_router.router)
app.include_router(assets_router.router)


@app.get("/", tags=["Health Check"])
def read_root():
    return {"status": "ok", "message": "Bienvenido a la API de Despachos"}

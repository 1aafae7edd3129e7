# config.py
import os
from dotenv import load_dotenv

load_dotenv()

# --- CONFIGURACIÓN DEL BACKEND REST ---
# URL base de la API de logística (vendedores, pedidos, activos, despachos)
API_BASE_URL = os.getenv("DESPACHOS_API_URL", "http://localhost:8080/api/v1")
API_TIMEOUT = float(os.getenv("DESPACHOS_API_TIMEOUT", "30"))

# --- CONFIGURACIÓN DE BASE DE DATOS ---
# Bitácora local de liquidaciones enviadas
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./despachos.db")
# Segundos tras los cuales una reserva de cierre sin confirmar se considera abandonada
SETTLEMENT_RESERVATION_TIMEOUT = int(os.getenv("DESPACHOS_RESERVATION_TIMEOUT", "300"))

# --- REGLAS DE DESPACHO ---
# Los heladeros reciben activos de alcance CLIENT (triciclos, congeladoras)
DEFAULT_ASSET_SCOPE = os.getenv("DESPACHOS_ASSET_SCOPE", "CLIENT")

# --- SERVIDOR ---
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173").split(",")
    if origin.strip()
]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

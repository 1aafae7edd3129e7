# despachos/application/session.py
from dataclasses import dataclass, field
from typing import Dict, Optional

import config


@dataclass
class BackOfficeSession:
    """
    Contexto explícito de una sesión de back-office: a qué backend se habla
    y con qué credenciales. Se inyecta en los adaptadores en lugar de leer
    estado global.
    """
    base_url: str = field(default_factory=lambda: config.API_BASE_URL)
    token: Optional[str] = None
    timeout: float = field(default_factory=lambda: config.API_TIMEOUT)

    @classmethod
    def from_authorization(cls, authorization: Optional[str]) -> "BackOfficeSession":
        """Construye la sesión a partir de una cabecera 'Bearer <token>'."""
        token = None
        if authorization:
            scheme, _, credentials = authorization.partition(" ")
            if scheme.lower() == "bearer" and credentials.strip():
                token = credentials.strip()
        return cls(token=token)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def auth_headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def clear(self) -> None:
        self.token = None

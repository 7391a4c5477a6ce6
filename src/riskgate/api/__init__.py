"""API - HTTP shell around the login risk engine.

Endpoints:
    POST /signup, POST /login, POST /logout, GET /history,
    POST /recovery/request, POST /recovery/verify, GET /health, GET /ready
"""

from riskgate.api.gateway import app
from riskgate.api.service import RiskGateService, SessionStore

__all__ = [
    "app",
    "RiskGateService",
    "SessionStore",
]

"""Local HTTP bridge between the rendering layer and the reveal manager."""

from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from .errors import (
    AlreadyInProgress,
    DecryptionFailed,
    FieldNotRevealed,
    RecordNotDisplayed,
    RevealError,
)
from .logging import get_logger
from .reveal import RevealSessionManager
from .services.auth import AuthContext

logger = get_logger("bridge")


class DisplayRequest(BaseModel):
    record_id: Optional[str] = None


class RevealRequest(BaseModel):
    record_id: str = Field(..., min_length=1)
    field_name: str = Field(..., min_length=1)
    challenge: Optional[str] = None
    signature: Optional[str] = None


class RevealResponse(BaseModel):
    """Reveal result. Plaintext is only handed out by /copy."""
    field_name: str
    expires_in: float


class RevealedFieldState(BaseModel):
    field_name: str
    remaining: float


class StateResponse(BaseModel):
    record_id: Optional[str]
    revealed: list[RevealedFieldState]


def _http_error(exc: RevealError) -> HTTPException:
    if isinstance(exc, DecryptionFailed):
        return HTTPException(status_code=502, detail=f"Decryption failed: {exc.reason}")
    if isinstance(exc, FieldNotRevealed):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, (AlreadyInProgress, RecordNotDisplayed)):
        return HTTPException(status_code=409, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


def create_bridge_app(manager: RevealSessionManager) -> FastAPI:
    """Create the bridge app around one manager."""
    app = FastAPI(title="D-Vault Reveal Bridge", version="0.1.0")

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    @app.put("/display", response_model=StateResponse)
    async def display(req: DisplayRequest):
        try:
            manager.display(req.record_id)
        except RevealError as e:
            raise _http_error(e)
        return _state()

    @app.post("/reveal", response_model=RevealResponse)
    async def reveal(req: RevealRequest):
        auth = None
        if req.challenge or req.signature:
            if not (req.challenge and req.signature):
                raise HTTPException(status_code=422, detail="challenge and signature must be sent together")
            auth = AuthContext(challenge=req.challenge, signature=req.signature)

        try:
            session = await manager.reveal_field(req.record_id, req.field_name, auth)
        except RevealError as e:
            raise _http_error(e)
        return RevealResponse(field_name=session.field_name, expires_in=session.ttl_seconds)

    @app.post("/mask/{field_name}", response_model=StateResponse)
    async def mask(field_name: str):
        manager.mask_field(field_name)
        return _state()

    @app.get("/copy/{field_name}")
    async def copy(field_name: str):
        try:
            plaintext = manager.copy_field(field_name)
        except RevealError as e:
            raise _http_error(e)
        return {"field_name": field_name, "plaintext": plaintext}

    @app.post("/teardown", response_model=StateResponse)
    async def teardown():
        manager.teardown_all()
        return _state()

    @app.get("/state", response_model=StateResponse)
    async def state():
        return _state()

    def _state() -> StateResponse:
        return StateResponse(
            record_id=manager.record_id,
            revealed=[
                RevealedFieldState(field_name=name, remaining=remaining)
                for name, remaining in sorted(manager.snapshot().items())
            ],
        )

    return app

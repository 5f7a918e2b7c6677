"""FastAPI application entry point."""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from vitrii_agenda.config import settings
from vitrii_agenda.database import Base, engine
from vitrii_agenda.errors import AgendaError

# Import routers
from vitrii_agenda.routers import users, advertisers, events, waitlist, reservations

# Import all models so Base.metadata knows about them
from vitrii_agenda.models.user import User                                  # noqa: F401
from vitrii_agenda.models.advertiser import Advertiser, AdvertiserMember    # noqa: F401
from vitrii_agenda.models.event import Event                                # noqa: F401
from vitrii_agenda.models.waitlist_entry import WaitlistEntry               # noqa: F401
from vitrii_agenda.models.reservation import EventReservation             # noqa: F401

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Vitrii Agenda",
    description="Agenda de anunciantes — eventos, fila de espera e aprovação de solicitações",
    version="0.1.0",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(AgendaError)
async def agenda_error_handler(request: Request, exc: AgendaError):
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error for %s: %s", request.url.path, exc.errors())
    details = [
        {"campo": ".".join(str(p) for p in err.get("loc", ())), "mensagem": err.get("msg")}
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Dados inválidos", "details": details})


# Register routers
app.include_router(users.router, prefix="/api/usuarios", tags=["Usuarios"])
app.include_router(advertisers.router, prefix="/api/anunciantes", tags=["Anunciantes"])
app.include_router(events.router, prefix="/api/eventos-agenda", tags=["EventosAgenda"])
app.include_router(waitlist.router, prefix="/api/filas-espera", tags=["FilasEspera"])
app.include_router(reservations.router, prefix="/api/reservas-evento", tags=["ReservasEvento"])


@app.on_event("startup")
def on_startup():
    """Create database tables on startup (for SQLite dev mode)."""
    if settings.DATABASE_URL.startswith("sqlite"):
        Base.metadata.create_all(bind=engine)


@app.get("/api/health")
def health_check():
    return {"status": "ok"}

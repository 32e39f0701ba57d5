# Vitality content API entry point
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from .settings import settings
from .routers.ready import router as ready_router
from .routers.ai import router as ai_router
from .routers.plans import router as plans_router
from .routers.venues import router as venues_router
from .routers.media import router as media_router

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("vitality")

# Rate limiter (per-IP); generation calls are expensive
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit_default])

app = FastAPI(title="Vitality Content API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["ready"])
app.include_router(ai_router, prefix="/api", tags=["ai"])
app.include_router(plans_router, prefix="/api", tags=["plans"])
app.include_router(venues_router, prefix="/api", tags=["venues"])
app.include_router(media_router, prefix="/api", tags=["media"])

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import auth, chat, health, tools
from .config import settings
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging(config=settings)

# Create FastAPI app
app = FastAPI(
    title="Onchain Chat Agent API",
    description="Chat assistant that reads and writes deployed contracts for a signed-in wallet",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestLoggingMiddleware)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(auth.router, prefix="/api")
app.include_router(chat.router, prefix="/api", tags=["Chat"])
app.include_router(tools.router, prefix="/api", tags=["Tools"])


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "Onchain Chat Agent API",
        "version": "0.1.0",
        "network_id": settings.network_id,
        "docs": "/docs",
        "health": "/healthz"
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )

"""
Minibank API Application Factory
"""

from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .accounts import router as accounts_router
from .dependencies import get_session
from .operations import router as operations_router
from .selection import router as selection_router
from ..config import MinibankConfig, get_config
from ..logging_config import setup_logging
from ..session import BankSession


def create_app(session: Optional[BankSession] = None,
               config: Optional[MinibankConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        session: Session to serve; built from configuration when omitted
        config: Configuration, the global instance by default
    """
    config = config or get_config()
    sync_on_startup = session is None and config.sync_on_startup
    session = session or BankSession.from_config(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if sync_on_startup:
            await session.sync_accounts()
        yield
        await session.close()

    app = FastAPI(
        title="Minibank Ledger API",
        description="In-memory personal-banking ledger",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan
    )
    app.state.session = session

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(accounts_router, prefix="/accounts", tags=["Accounts"])
    app.include_router(selection_router, prefix="/selection", tags=["Selection"])
    app.include_router(operations_router, prefix="/operations", tags=["Operations"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {
            "status": "healthy",
            "service": "minibank_api",
            "version": "1.0.0"
        }

    @app.post("/sync")
    async def sync_accounts(session: BankSession = Depends(get_session)):
        """Reload accounts from the account service, keeping local ones on failure"""
        synced = await session.sync_accounts()
        return {"synced": synced, "accounts": len(session.accounts())}

    return app


def build_app() -> FastAPI:
    """uvicorn factory: configure logging and build the app from the environment"""
    config = get_config()
    setup_logging(config.log_level, log_format=config.log_format, log_file=config.log_file)
    return create_app(config=config)


def run_server(host: str = "0.0.0.0", port: int = 8090, debug: bool = False):
    """Run the FastAPI server"""
    uvicorn.run(
        "minibank.api:build_app",
        factory=True,
        host=host,
        port=port,
        reload=debug,
        log_level="info"
    )

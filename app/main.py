from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.errors import AppError, RemoteCallError
from app.api import services, bookings, session, admin_bookings
from app.core.logger import setup_logging, logger
from app.services.session_context import session_context
from contextlib import asynccontextmanager
from datetime import datetime

setup_logging()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("🚀 Starting Laundry Booking Backend")
    await session_context.start()
    yield
    # Shutdown
    await session_context.stop()
    logger.info("🛑 Shutting down backend")

app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan
)

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    # RemoteCallError detail is already logged by the gateway; clients get the generic message
    if not isinstance(exc, RemoteCallError):
        logger.info(f"↩️ {request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})

# Global Exception Handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"🔥 UNHANDLED ERROR: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error", "detail": "An unexpected error occurred. Please contact support."}
    )

# Include routers
app.include_router(services.router, tags=["Services"])
app.include_router(bookings.router, tags=["Bookings"])
app.include_router(session.router, tags=["Session"])
app.include_router(admin_bookings.router, tags=["Admin"])

@app.get("/")
async def health_check():
    return {'status': 'active', 'time': datetime.now().isoformat()}

@app.get("/health")
async def health_check_std():
    return {
        "status": "ok",
        "environment": settings.ENVIRONMENT,
        "auth_events": session_context.started,
        "sessions_in_flight": session_context.tracked_users,
        "timestamp": datetime.now().isoformat(),
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=settings.PORT, reload=True)

# chore_wars/server.py
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from chore_wars import config
from chore_wars.core.database import init_db
from chore_wars.core.logger import setup_logging
from chore_wars.routers import quest_router

logger = setup_logging("server")
# parents of the service.* / core.* module loggers
setup_logging("service")
setup_logging("core")


# --- Lifecycle (startup / shutdown) ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Chore Wars starting...")
    logger.info(f"📂 Server is using DB at: {config.SQLITE_DB_PATH}")
    init_db()
    yield
    logger.info("👋 Chore Wars stopped")


app = FastAPI(lifespan=lifespan)
app.include_router(quest_router.router, prefix="/api/quest", tags=["Quest"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def main():
    uvicorn.run(app, host=config.SERVER_HOST, port=config.SERVER_PORT)


if __name__ == "__main__":
    main()

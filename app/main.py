# app/main.py
from contextlib import asynccontextmanager
import logging
import sys
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient

from app.core.config import settings
from app.database.mongo_assignment import MongoAssignmentRepository
from app.database.mongo_submission import MongoSubmissionRepository
from app.database.mongo_user import MongoUserRepository
from app.services.attachment_store import LoggingAttachmentStore
from app.routers.v1 import health
from app.routers.v1 import assignment
from app.routers.v1 import submission

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger("classroom")


def create_app() -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # tz_aware: le date tornano da Mongo in UTC, confrontabili con now()
        client = AsyncIOMotorClient(settings.mongo_uri, uuidRepresentation="standard", tz_aware=True)
        db = client[settings.mongo_db_name]

        assignment_repo = MongoAssignmentRepository(db)
        submission_repo = MongoSubmissionRepository(db)
        await assignment_repo.ensure_indexes()
        await submission_repo.ensure_indexes()

        app.state.assignment_repo = assignment_repo
        app.state.submission_repo = submission_repo
        app.state.user_repo = MongoUserRepository(db)
        # il backend reale dei blob puo' sostituirlo prima dello startup
        if getattr(app.state, "attachment_store", None) is None:
            app.state.attachment_store = LoggingAttachmentStore()

        logger.info("Connesso a MongoDB, database %s", settings.mongo_db_name)
        try:
            yield
        finally:
            client.close()

    app = FastAPI(
        title="Classroom Assignment Service",
        description="Assignment, consegne e valutazioni di una classe",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list, allow_credentials=True,
        allow_methods=["*"], allow_headers=["*"],
    )

    app.include_router(health.router,     prefix="/api/v1", tags=["health"])
    app.include_router(assignment.router, prefix="/api/v1", tags=["assignments"])
    app.include_router(submission.router, prefix="/api/v1", tags=["submissions"])
    return app

app = create_app()

from fastapi import APIRouter

router = APIRouter()

SERVICE_NAME = "classroom-assignments"


@router.get("/assignments/health")
async def health_check():
    return {"status": "ok", "service": SERVICE_NAME}

import logging

from fastapi import FastAPI

from nutrikernel.config import settings
from nutrikernel.engine.router import router as nutrition_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

app = FastAPI(title="NutriKernel", version="0.1.0")
app.include_router(nutrition_router)


@app.get("/")
async def root() -> dict:
    return {
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "nutrition": {
            "calculate": "/nutrition/calculate",
            "activity_levels": "/nutrition/activity-levels",
            "activity_level": "/nutrition/activity-levels/{level_id}",
            "training_goals": "/nutrition/training-goals",
            "goals_create": "/nutrition/users/{user_id}/goals",
            "goals_current": "/nutrition/users/{user_id}/goals/current",
            "goals_history": "/nutrition/users/{user_id}/goals/history",
            "calibration": "/nutrition/users/{user_id}/calibration",
            "goal_update": "/nutrition/goals/{goal_id}",
            "goal_method": "/nutrition/goals/{goal_id}/method",
        },
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}

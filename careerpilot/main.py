from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from careerpilot.config import get_settings
from careerpilot.routers import ai, auth, interview, jobs, profile, progress, quiz, resume, roadmap
from careerpilot.services.analysis_cache import get_analysis_cache

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        yield
    finally:
        # Let analyses computed for abandoned requests finish landing in the cache
        await get_analysis_cache().drain()


app = FastAPI(title="CareerPilot API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth.router)
app.include_router(profile.router)
app.include_router(resume.router)
app.include_router(roadmap.router)
app.include_router(quiz.router)
app.include_router(interview.router)
app.include_router(progress.router)
app.include_router(jobs.router)
app.include_router(ai.router)


@app.get("/")
def root():
    return {"message": "CareerPilot API", "docs": "/docs"}

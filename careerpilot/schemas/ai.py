from pydantic import BaseModel


class AiHealthResponse(BaseModel):
    status: str  # "ok" | "failed"
    message: str = ""

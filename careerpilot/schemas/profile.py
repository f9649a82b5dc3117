from pydantic import BaseModel, Field


class SignupRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class ProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    target_role: str
    skills: list[str]
    resume_text: str = ""  # content of the latest resume analysis

    class Config:
        from_attributes = True


class ProfileUpdate(BaseModel):
    """All fields optional; only provided fields are changed."""
    name: str | None = None
    target_role: str | None = None
    skills: list[str] | None = None


class TokenPayload(BaseModel):
    sub: str  # profile id
    email: str
    exp: int
    type: str = "access"


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    profile: ProfileResponse

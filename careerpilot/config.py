from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Database (hosted Postgres in production)
    database_url: str = "sqlite:///./careerpilot.db"

    # JWT
    secret_key: str = "your-secret-key-change-in-production"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24 * 7  # 7 days

    # Frontend URL for CORS
    frontend_url: str = "http://localhost:3000"

    # Gemini: API key (AI Studio) or Vertex AI project; API key wins when both are set
    gemini_api_key: str = ""
    vertex_project_id: str = ""
    vertex_location: str = "us-central1"
    vertex_credentials_path: str = ""  # path to service account JSON; empty = use ADC
    gemini_analysis_model: str = "gemini-3-pro-preview"  # resume, roadmap, interview
    gemini_fast_model: str = "gemini-3-flash-preview"  # quiz, connectivity ping
    gemini_tts_model: str = "gemini-2.5-flash-preview-tts"
    gemini_tts_voice: str = "Kore"

    # Owner id used for requests without a token
    guest_owner_id: str = "guest"

    # Resume analysis cache (false = always call Gemini)
    analysis_cache_enabled: bool = True

    class Config:
        env_file = ".env"


@lru_cache
def get_settings() -> Settings:
    return Settings()

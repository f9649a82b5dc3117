"""
Gemini service for careerpilot: resume ATS analysis, learning roadmaps, quizzes,
interview feedback and interviewer speech.
Uses one process-wide google-genai client (AI Studio API key or Vertex AI).
Every structured call asks for JSON with a response schema and parses it into a
typed contract; anything that does not parse is an AnalysisResponseError.
"""
import base64
import logging
from pathlib import Path
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from careerpilot.config import get_settings
from careerpilot.schemas.interview import InterviewFeedback, InterviewRound
from careerpilot.schemas.quiz import QuizQuestion
from careerpilot.schemas.resume import ResumeAnalysis
from careerpilot.schemas.roadmap import LearningRoadmap

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Same seed for same input so repeated analyses score consistently
DETERMINISTIC_SEED = 42


class AnalysisServiceError(Exception):
    """Gemini call failed. Not retried here; routers map subclasses to HTTP codes."""


class AnalysisAuthError(AnalysisServiceError):
    """Key missing, rejected, or not entitled to the model. User should select another key."""


class AnalysisUnavailableError(AnalysisServiceError):
    """Network failure, rate limit or server error. Retryable."""


class AnalysisResponseError(AnalysisServiceError):
    """Empty or malformed model output. Not retryable."""


# ---- Client handle ----

_gemini_client = None


def get_client():
    """Lazy singleton. Built on first use from current settings."""
    global _gemini_client
    if _gemini_client is not None:
        return _gemini_client
    try:
        from google import genai
        from google.oauth2 import service_account
    except ImportError as e:
        raise RuntimeError(
            "Google GenAI not installed. pip install google-genai google-auth"
        ) from e

    settings = get_settings()
    if settings.gemini_api_key:
        _gemini_client = genai.Client(api_key=settings.gemini_api_key)
        return _gemini_client

    if not settings.vertex_project_id:
        raise AnalysisAuthError("Gemini is not configured: set gemini_api_key or vertex_project_id")

    credentials = None
    if settings.vertex_credentials_path:
        path = Path(settings.vertex_credentials_path)
        if path.is_file():
            credentials = service_account.Credentials.from_service_account_file(
                str(path),
                scopes=["https://www.googleapis.com/auth/cloud-platform"],
            )

    _gemini_client = genai.Client(
        vertexai=True,
        project=settings.vertex_project_id,
        location=settings.vertex_location,
        credentials=credentials,
    )
    return _gemini_client


def reset_client() -> None:
    """Drop the cached client (after the user selects another key). Next call rebuilds it."""
    global _gemini_client
    _gemini_client = None
    get_settings.cache_clear()
    logger.info("Gemini client reset")


def _translate_error(e: Exception) -> AnalysisServiceError:
    from google.genai import errors

    if isinstance(e, AnalysisServiceError):
        return e
    if isinstance(e, errors.APIError):
        code = e.code or 0
        if code in (401, 403) or "Requested entity was not found" in str(e):
            return AnalysisAuthError(str(e))
        if code == 429 or code >= 500:
            return AnalysisUnavailableError(str(e))
        return AnalysisServiceError(str(e))
    if isinstance(e, (httpx.TransportError, ConnectionError, TimeoutError)):
        return AnalysisUnavailableError(str(e))
    return AnalysisServiceError(str(e))


def _generate(model: str, contents: Any, config: Any):
    try:
        return get_client().models.generate_content(model=model, contents=contents, config=config)
    except Exception as e:
        logger.warning("Gemini call to %s failed: %s", model, e)
        raise _translate_error(e) from e


def _parse(response: Any, result_type: type[T]) -> T:
    text = getattr(response, "text", None) if response is not None else None
    if not text:
        raise AnalysisResponseError("Empty response from model")
    try:
        return TypeAdapter(result_type).validate_json(text)
    except ValidationError as e:
        raise AnalysisResponseError(f"Model response does not match the expected schema: {e}") from e


# ---- Response schemas ----

def _string_array(types: Any) -> Any:
    return types.Schema(type=types.Type.ARRAY, items=types.Schema(type=types.Type.STRING))


def _resume_schema(types: Any) -> Any:
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "atsScore": types.Schema(type=types.Type.NUMBER),
            "extractedSkills": _string_array(types),
            "missingSkills": _string_array(types),
            "strengths": _string_array(types),
            "improvements": _string_array(types),
        },
        required=["atsScore", "extractedSkills", "missingSkills", "strengths", "improvements"],
    )


def _roadmap_schema(types: Any) -> Any:
    module = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "name": types.Schema(type=types.Type.STRING),
            "description": types.Schema(type=types.Type.STRING),
            "resources": _string_array(types),
        },
        required=["name", "description", "resources"],
    )
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": types.Schema(type=types.Type.STRING),
            "duration": types.Schema(type=types.Type.STRING),
            "modules": types.Schema(type=types.Type.ARRAY, items=module),
        },
        required=["title", "duration", "modules"],
    )


def _quiz_schema(types: Any) -> Any:
    question = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "id": types.Schema(type=types.Type.STRING),
            "question": types.Schema(type=types.Type.STRING),
            "options": _string_array(types),
            "correctAnswer": types.Schema(
                type=types.Type.NUMBER, description="Index of the correct option (0-3)"
            ),
            "explanation": types.Schema(type=types.Type.STRING),
        },
        required=["id", "question", "options", "correctAnswer", "explanation"],
    )
    return types.Schema(type=types.Type.ARRAY, items=question)


def _feedback_schema(types: Any) -> Any:
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "score": types.Schema(type=types.Type.NUMBER),
            "feedback": types.Schema(type=types.Type.STRING),
            "suggestion": types.Schema(type=types.Type.STRING),
        },
        required=["score", "feedback", "suggestion"],
    )


# ---- Resume ----

RESUME_SYSTEM_INSTRUCTION = """You are an elite Technical Recruiter and ATS Optimization Expert.

Rules:
1. For the same content and role, return the same score.
2. Technologies mentioned in projects (e.g. Python, CNN, TensorFlow, OpenCV) count as present skills.
3. Give a consistent ATS score (0-100) based on keyword density, role relevance and project impact.
4. If a skill is clearly in the resume, it must be in 'extractedSkills' and 'strengths'."""


def analyze_resume(
    content: str | bytes, target_role: str, mime_type: str | None = None
) -> ResumeAnalysis:
    """
    ATS analysis of a resume for target_role.
    content is pasted text, or the document (base64 string or raw bytes) when
    mime_type is given (PDF/TXT upload).
    """
    from google.genai import types

    settings = get_settings()
    parts = []
    if mime_type:
        # Uploaded documents arrive base64 encoded (that string is also what gets hashed)
        data = base64.b64decode(content) if isinstance(content, str) else content
        parts.append(types.Part.from_bytes(data=data, mime_type=mime_type))
    else:
        text = content.decode("utf-8") if isinstance(content, bytes) else content
        parts.append(types.Part.from_text(text=f"Resume Text Content: {text}"))
    parts.append(types.Part.from_text(
        text=f'TASK: Conduct a comprehensive ATS analysis of this resume for the specific role: "{target_role}".'
    ))

    response = _generate(
        settings.gemini_analysis_model,
        [types.Content(role="user", parts=parts)],
        types.GenerateContentConfig(
            system_instruction=RESUME_SYSTEM_INSTRUCTION,
            seed=DETERMINISTIC_SEED,
            response_mime_type="application/json",
            response_schema=_resume_schema(types),
        ),
    )
    return _parse(response, ResumeAnalysis)


# ---- Roadmap ----

def generate_roadmap(current_skills: list[str], target_role: str) -> LearningRoadmap:
    from google.genai import types

    settings = get_settings()
    response = _generate(
        settings.gemini_analysis_model,
        f"Skills: [{', '.join(current_skills)}]\nTarget Role: {target_role}",
        types.GenerateContentConfig(
            system_instruction=(
                "Generate a detailed learning roadmap including duration "
                "and YouTube search queries for resources."
            ),
            seed=DETERMINISTIC_SEED,
            response_mime_type="application/json",
            response_schema=_roadmap_schema(types),
        ),
    )
    roadmap = _parse(response, LearningRoadmap)
    roadmap.target_role = target_role
    return roadmap


# ---- Quiz ----

def generate_quiz(topic: str, level: str) -> list[QuizQuestion]:
    from google.genai import types

    settings = get_settings()
    response = _generate(
        settings.gemini_fast_model,
        f"Generate a 5-question multiple choice quiz about {topic} at {level} level.",
        types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=_quiz_schema(types),
        ),
    )
    questions = _parse(response, list[QuizQuestion])
    if not questions:
        raise AnalysisResponseError("Model returned an empty quiz")
    return questions


# ---- Interview ----

def get_interview_feedback(
    question: str, answer: str, role: str, interview_round: InterviewRound
) -> InterviewFeedback:
    from google.genai import types

    settings = get_settings()
    response = _generate(
        settings.gemini_analysis_model,
        f"Round: {interview_round.value}\nQuestion: {question}\nUser Answer: {answer}",
        types.GenerateContentConfig(
            system_instruction=(
                f"Evaluate the user's answer for the job role: {role} "
                f"in a {interview_round.value} interview context."
            ),
            response_mime_type="application/json",
            response_schema=_feedback_schema(types),
        ),
    )
    return _parse(response, InterviewFeedback)


def text_to_speech(text: str) -> str | None:
    """
    Interviewer voice. Returns base64 16-bit PCM (24 kHz mono) or None.
    Speech is optional for the interview flow, so failures are logged, not raised.
    """
    from google.genai import types

    settings = get_settings()
    try:
        response = _generate(
            settings.gemini_tts_model,
            [types.Content(parts=[types.Part.from_text(
                text=f"Speak this naturally as a professional interviewer: {text}"
            )])],
            types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=settings.gemini_tts_voice),
                    ),
                ),
            ),
        )
    except AnalysisServiceError as e:
        logger.error("TTS failed: %s", e)
        return None

    try:
        data = response.candidates[0].content.parts[0].inline_data.data
    except (AttributeError, IndexError, TypeError):
        logger.warning("TTS response had no audio part")
        return None
    if not data:
        return None
    if isinstance(data, str):
        return data
    return base64.b64encode(data).decode("ascii")


# ---- Connectivity ----

def check_connectivity() -> bool:
    """Cheap ping to check the current key works."""
    settings = get_settings()
    try:
        response = get_client().models.generate_content(model=settings.gemini_fast_model, contents="ping")
        return bool(getattr(response, "text", None))
    except Exception as e:
        logger.error("Connectivity test failed: %s", e)
        return False

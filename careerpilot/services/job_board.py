"""Job board catalog with case-insensitive search over title, company and description."""
from careerpilot.schemas.jobs import JobRecommendation

JOBS = [
    JobRecommendation(
        id="1",
        title="Senior React Developer",
        company="InnovateTech",
        location="Remote, USA",
        match_score=94,
        description=(
            "Looking for a React expert with 5+ years experience in building "
            "high-performance web applications..."
        ),
        link="https://example.com/apply/1",
    ),
    JobRecommendation(
        id="2",
        title="Full Stack Engineer",
        company="GrowthStack",
        location="Austin, TX",
        match_score=82,
        description=(
            "Join our core engineering team to build scalable APIs using Node.js "
            "and modern frontend frameworks..."
        ),
        link="https://example.com/apply/2",
    ),
    JobRecommendation(
        id="3",
        title="Frontend Architect",
        company="CloudFlow",
        location="New York, NY",
        match_score=78,
        description=(
            "Lead the architectural design of our new customer portal and mentor "
            "junior developers..."
        ),
        link="https://example.com/apply/3",
    ),
    JobRecommendation(
        id="4",
        title="Python Backend Specialist",
        company="DataStream",
        location="San Francisco, CA",
        match_score=88,
        description=(
            "Deep dive into distributed systems and high-throughput data processing "
            "using Python and FastAPI."
        ),
        link="https://example.com/apply/4",
    ),
]


def search_jobs(term: str | None = None) -> list[JobRecommendation]:
    if not term or not term.strip():
        return list(JOBS)
    term = term.strip().lower()
    return [
        job for job in JOBS
        if term in job.title.lower() or term in job.company.lower() or term in job.description.lower()
    ]

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

router = APIRouter()


class PersonaBody(BaseModel):
    name: str
    backstory: str
    tone: str


class GenerateRequest(BaseModel):
    interests: list[str] = Field(default_factory=list)
    location: str = ""


class BatchItem(BaseModel):
    style_id: str
    interests: list[str] = Field(default_factory=list)


class BatchRequest(BaseModel):
    location: str = ""
    items: list[BatchItem] = Field(default_factory=list)


class BatchResult(BaseModel):
    style_id: str
    persona: PersonaBody | None = None


class BatchResponse(BaseModel):
    status: str = "OK"
    results: list[BatchResult] = Field(default_factory=list)


class SuggestedResponse(BaseModel):
    personas: list[PersonaBody] = Field(default_factory=list)


def _persona(interests: list[str], location: str) -> PersonaBody:
    return PersonaBody(
        name=f"{interests[0] if interests else 'Travel'} Explorer",
        backstory=f"A passionate traveler interested in {', '.join(interests)} in {location}",
        tone="enthusiastic and knowledgeable",
    )


@router.post("/generate", response_model=PersonaBody)
async def generate(body: GenerateRequest) -> PersonaBody:
    return _persona(body.interests, body.location)


@router.post("/batch", response_model=BatchResponse)
async def generate_batch(body: BatchRequest) -> BatchResponse:
    # A style with no usable interests gets no persona (partial success).
    return BatchResponse(
        status="OK",
        results=[
            BatchResult(
                style_id=item.style_id,
                persona=_persona(item.interests, body.location) if item.interests else None,
            )
            for item in body.items
        ],
    )


@router.get("/suggested", response_model=SuggestedResponse)
async def suggested(location: str) -> SuggestedResponse:
    return SuggestedResponse(
        personas=[
            PersonaBody(
                name="The Local Explorer",
                backstory=f"A curious traveler who loves discovering hidden gems in {location}",
                tone="friendly and enthusiastic",
            ),
            PersonaBody(
                name="The Culture Seeker",
                backstory=f"Someone passionate about the rich cultural heritage of {location}",
                tone="respectful and inquisitive",
            ),
            PersonaBody(
                name="The Adventure Guide",
                backstory=f"An energetic explorer who seeks unique experiences in {location}",
                tone="exciting and encouraging",
            ),
        ]
    )

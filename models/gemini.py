"""Wire models for the Gemini streamGenerateContent endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class Part(BaseModel):
    text: str = ""


class Content(BaseModel):
    role: str | None = None
    parts: list[Part] = Field(default_factory=list)


class GenerationConfig(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response_mime_type: str = Field(default="text/plain", alias="responseMimeType")
    temperature: float = 1.4
    top_p: float = Field(default=0.9, alias="topP")


class GenerateContentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    contents: list[Content]
    generation_config: GenerationConfig = Field(default_factory=GenerationConfig, alias="generationConfig")


class Candidate(BaseModel):
    content: Content = Field(default_factory=Content)


class StreamChunk(BaseModel):
    """One partial result of the streamed JSON array."""

    candidates: list[Candidate] = Field(default_factory=list)

    def first_text(self) -> str | None:
        if not self.candidates or not self.candidates[0].content.parts:
            return None
        return self.candidates[0].content.parts[0].text

"""Canonical CV document produced by either extraction strategy."""

from pydantic import BaseModel


class Contact(BaseModel):
    name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    github: str = ""


class Experience(BaseModel):
    """A single work experience entry."""
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    description: str = ""
    confidence: float = 0.7


class Education(BaseModel):
    """A single education entry."""
    degree: str = ""
    institution: str = ""
    field: str = ""  # engineering, computer_science, management, science, general
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""


class Skills(BaseModel):
    technical: list[str] = []
    soft: list[str] = []
    languages: list[str] = []


class CVMetadata(BaseModel):
    confidence: float = 0.0
    language: str = "unknown"
    timestamp: str = ""
    needs_review: bool = True
    # Filled in by the hybrid orchestrator
    extraction_method: str = ""  # "ai" | "ner"
    ai_attempted: bool = False
    ai_error: str | None = None
    text_length: int = 0


class CVDocument(BaseModel):
    contact: Contact = Contact()
    summary: str = ""
    experience: list[Experience] = []
    education: list[Education] = []
    skills: Skills = Skills()
    certifications: list[str] = []
    metadata: CVMetadata = CVMetadata()

"""Prompt templates for Gemini API calls."""

_LANGUAGE_INSTRUCTIONS: dict[str, str] = {
    "hi": "The text is primarily in Hindi (Devanagari script). Preserve all Hindi names and text in Devanagari.",
    "en": "The text is primarily in English.",
    "mixed": (
        "The text contains mixed Hindi and English. Preserve Hindi names in Devanagari "
        "script and English names in Latin script."
    ),
}


def _language_instruction(language: str) -> str:
    if language in _LANGUAGE_INSTRUCTIONS:
        return _LANGUAGE_INSTRUCTIONS[language]
    if language and language not in ("auto", "unknown"):
        return (
            f"The text is primarily in the language with code '{language}'. "
            "Preserve names and institutions in their original script."
        )
    return _LANGUAGE_INSTRUCTIONS["mixed"]


def build_cv_extraction_prompt(text: str, language: str) -> str:
    """Ask for the structured CV of a voice-transcribed self-introduction."""
    return f"""You are an expert at extracting structured information from Indian CV/resume content, especially from voice transcriptions.

{_language_instruction(language)}

TEXT TO ANALYZE:
---
{text}
---

EXTRACTION INSTRUCTIONS:
1. Name patterns:
   - Hindi: "मेरा नाम [NAME] है", "मैं [NAME] हूं"
   - English: "I am [NAME]", "My name is [NAME]", "This is [NAME]"
2. Contact information: email addresses, phone numbers (Indian: 10 digits
   starting with 6-9, or +91 prefix), location (city, state).
3. Education: degrees (BTech, MTech, MBA, BCA, MCA, Bachelor's, Master's, PhD,
   बी.टेक, एम.टेक), field of study, institutions (IIT, NIT, universities,
   colleges). Look for "पढ़ता हूं", "studying at", "from [institution]".
4. Work experience: job titles, company names, durations ("2018 to 2020",
   "currently working"). Look for "काम करता हूं", "working at", "worked at".
5. Skills: technical skills and tools, from lists and comma-separated values.
6. Voice transcription: names may be spelled phonetically; accept spelling
   variations; context matters more than exact matches.
7. Keep names in their original script. Do not translate names.

Respond with ONLY valid JSON (no markdown, no code fences) in this exact structure:
{{
  "personal_info": {{
    "name": "<full name, original script>",
    "email": "<email or null>",
    "phone": "<phone number or null>",
    "location": "<city/state or null>",
    "linkedin": null,
    "github": null
  }},
  "summary": "<brief professional summary if mentioned, otherwise null>",
  "work_experience": [
    {{
      "job_title": "<position>",
      "company": "<company name>",
      "location": null,
      "start_date": "<year or month-year>",
      "end_date": "<year or Present>",
      "responsibilities": ["<duty>"]
    }}
  ],
  "education": [
    {{
      "degree": "<BTech/MTech/Bachelor's/etc>",
      "field_of_study": "<Computer Science, AI, etc>",
      "institution": "<college/university name>",
      "location": null,
      "start_date": "<year>",
      "end_date": "<year>",
      "gpa": "<if mentioned, otherwise null>"
    }}
  ],
  "skills": ["<skill>"],
  "certifications": []
}}

Use null for any missing information and extract everything present in the text."""

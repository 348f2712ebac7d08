"""Placeholder PDF and Word extractors.

Neither parses its format yet: both return the same fixed sample policy so
the rest of the pipeline (chunking, embedding, retrieval) can be exercised
end to end with binary uploads.  Replace with a real parser behind
:class:`ITextExtractor` when binary formats need to be supported.
"""

from __future__ import annotations

import structlog

from policy_advisor.interfaces.text_extractor import ITextExtractor

logger = structlog.get_logger(logger_name=__name__)

SAMPLE_POLICY_TEXT = """\
Employee Remote Work Policy

1. OVERVIEW
This policy outlines the guidelines for remote work arrangements for all employees of the company.

2. ELIGIBILITY
International employees are eligible for remote work with the following requirements:
- Must maintain overlap with core business hours (9 AM - 3 PM local time)
- Require manager approval for remote work arrangements
- Must have reliable internet connection and appropriate workspace
- Tax and legal compliance in the country of residence

3. APPROVAL PROCESS
All remote work requests must be submitted through the HR portal and approved by:
- Direct manager
- HR department
- Legal team (for international employees)

4. EQUIPMENT AND SECURITY
- Company will provide necessary equipment for remote work
- Employees must follow all security protocols
- VPN access required for all company systems
- Regular security training mandatory

5. PERFORMANCE EXPECTATIONS
- Maintain same productivity levels as in-office work
- Regular check-ins with supervisor
- Participate in all required meetings
- Meet all project deadlines

6. COMMUNICATION
- Must be available during agreed working hours
- Respond to communications within 4 hours during business hours
- Use company-approved communication tools

For specific international considerations, please consult with HR and Legal teams."""


class _SampleTextExtractor(ITextExtractor):
    _name = "sample"

    async def extract(self, data: bytes, mime_type: str) -> str:
        logger.warning(
            "placeholder_extraction",
            extractor=self._name,
            mime_type=mime_type,
            size=len(data),
        )
        return SAMPLE_POLICY_TEXT

    def get_provider_name(self) -> str:
        return self._name


class PDFTextExtractor(_SampleTextExtractor):
    """Placeholder for ``application/pdf``."""

    _name = "pdf-placeholder"

    def supports(self, mime_type: str) -> bool:
        return mime_type == "application/pdf"


class WordTextExtractor(_SampleTextExtractor):
    """Placeholder for ``application/msword`` and ``.docx``."""

    _name = "word-placeholder"

    def supports(self, mime_type: str) -> bool:
        return mime_type in (
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        )

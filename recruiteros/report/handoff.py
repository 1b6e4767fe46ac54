"""
Hiring manager hand-off email.

Drafts a short email introducing a candidate to the hiring manager from
the candidate's analysis: the match score, the top strength, the main
concern and a suggested interview focus.  Integrity issues take
priority over skill gaps as the stated concern.
"""

from __future__ import annotations

from ..pipeline.schema import AnalysisResult

DEFAULT_STRENGTH = "Solid technical background"
DEFAULT_CONCERN = "No major red flags identified."
DEFAULT_QUESTION = "Walk me through your most complex project."

_TEMPLATE = """Hi [Hiring Manager],

I found a strong candidate for the role. {name} is a {score}% match based on the job description.

Key Highlights:
• Top Strength: {strength}
• Potential Concern: {concern}

Suggested Interview Focus:
{question}

Link to resume: [Insert Link Here]

Best,
Recruiting Team"""


def draft_handoff_email(analysis: AnalysisResult, candidate_name: str) -> str:
    strength = analysis.top_strengths[0] if analysis.top_strengths else DEFAULT_STRENGTH
    if analysis.integrity_check.flagged and analysis.integrity_check.issues:
        concern = analysis.integrity_check.issues[0]
    elif analysis.gap_analysis:
        concern = analysis.gap_analysis[0]
    else:
        concern = DEFAULT_CONCERN
    question = analysis.interview_questions[0] if analysis.interview_questions else DEFAULT_QUESTION
    return _TEMPLATE.format(
        name=candidate_name,
        score=analysis.fit_score,
        strength=strength,
        concern=concern,
        question=question,
    )

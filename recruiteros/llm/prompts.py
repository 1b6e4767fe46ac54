"""
Prompt templates for the AI services.

Kept apart from the provider classes so the Gemini and OpenAI providers
send identical instructions.
"""

from __future__ import annotations

import json
from typing import Dict, List, Optional

RECRUITER_SYSTEM_INSTRUCTION = "You are a fair and moderate technical recruiter."
BLIND_RECRUITER_SYSTEM_INSTRUCTION = "You are a fair and moderate technical recruiter practicing blind hiring."

_BLIND_MODE_BLOCK = """
*** BLIND HIRING MODE ACTIVE ***
- STRICTLY IGNORE the candidate's Name, Gender, Age, Photo/Headshot, and University/College Names.
- Do not allow the prestige of a university or demographic factors to influence the score.
- Focus ONLY on skills, experience, projects, and technical qualifications.
- In your output, refer to the candidate as "The Candidate".
"""

_ANALYSIS_TEMPLATE = """Job Description:
{job_description}

System Instruction:
You are a balanced and moderate technical recruiter. Visually analyze the resume layout and content provided in the image/pdf.
Compare it to the Job Description above.

BEHAVIOR GUIDELINES:
- Be OBJECTIVE but FAIR. Do not be overly harsh.
- Recognize transferable skills (e.g., if JD asks for AWS and candidate has Azure, that is a partial match, not a zero).
- Look for "potential" and "fundamentals" rather than exact keyword matches only.
- However, maintain professional standards: if a core hard skill is completely missing, note it.
{blind_block}
Tasks:
1. Analyze the content for skill matches against the JD. Identify the top 3 distinct strengths.

2. GENERATE TAGS (Crucial): Create exactly 3 tags for this candidate:
   - One GREEN tag (type: 'strength'): A unique key strength (e.g., "Ex-Google", "Patent Holder", "PhD").
   - One RED tag (type: 'risk'): A potential risk factor (e.g., "Job Hopper", "Gap Year", "Short Tenure"). If no major risk, use "Generalist".
   - One BLUE tag (type: 'skill'): The absolute top hard skill (e.g., "Python Expert", "System Design").

3. Visually analyze the document formatting (Resume Quality):
   - Evaluate "readabilityScore" (0-100) based on: effective use of whitespace, clear section hierarchy, consistent font usage, and bullet point alignment.
   - Rubric:
     * 90-100: Professional, polished, easy to scan, excellent layout.
     * 75-89: Good readability, minor spacing or inconsistency issues.
     * 50-74: Average, slightly cluttered or dense, but readable.
     * <50: Poorly formatted, hard to read, unstructured, or plain text dump.
   - Provide specific "visualFeedback" on layout, fonts, or density.

4. Perform an "Integrity Check":
   - Audit dates for impossible timelines (e.g., Senior title with <3 years exp).
   - Flag "Buzzword Stuffing" (listing complex skills like Kubernetes/AI without project evidence).
   - Check for employment gaps disguised as generic "Freelancing" or "Consulting" without client details.
   - If any logical inconsistencies are found, set status to 'flagged' and list specific issues. Otherwise, 'clean'.

5. Evaluate the "Fit Score" based on this MODERATE rubric:
   - 90-100: Excellent match (Strongly aligned with requirements, exceeds expectations).
   - 75-89: Good match (Meets most core requirements; minor gaps are acceptable/trainable).
   - 60-74: Moderate match (Has potential and relevant fundamentals, but missing specific tools or seniority).
   - 40-59: Weak match (Significant gaps in core requirements, but has some relevant background).
   - 0-39: Mismatch (Irrelevant background).

Output JSON with the keys fitScore, scoreReasoning, topStrengths, candidateTags
(objects with label, color, type), resumeQuality (readabilityScore, visualFeedback),
integrityCheck (status, issues), gapAnalysis and interviewQuestions.
"""

# Response schema for Gemini's JSON mode (OpenAPI subset accepted by
# google-generativeai).
ANALYSIS_RESPONSE_SCHEMA: Dict[str, object] = {
    "type": "OBJECT",
    "properties": {
        "fitScore": {"type": "NUMBER"},
        "scoreReasoning": {"type": "STRING"},
        "topStrengths": {"type": "ARRAY", "items": {"type": "STRING"}},
        "candidateTags": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "label": {"type": "STRING"},
                    "color": {"type": "STRING"},
                    "type": {"type": "STRING"},
                },
            },
        },
        "resumeQuality": {
            "type": "OBJECT",
            "properties": {
                "readabilityScore": {"type": "NUMBER"},
                "visualFeedback": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
            "required": ["readabilityScore", "visualFeedback"],
        },
        "integrityCheck": {
            "type": "OBJECT",
            "properties": {
                "status": {"type": "STRING"},
                "issues": {"type": "ARRAY", "items": {"type": "STRING"}},
            },
            "required": ["status", "issues"],
        },
        "gapAnalysis": {"type": "ARRAY", "items": {"type": "STRING"}},
        "interviewQuestions": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": [
        "fitScore",
        "scoreReasoning",
        "topStrengths",
        "candidateTags",
        "resumeQuality",
        "integrityCheck",
        "gapAnalysis",
        "interviewQuestions",
    ],
}

FILTER_RESPONSE_SCHEMA: Dict[str, object] = {"type": "ARRAY", "items": {"type": "STRING"}}


def analysis_prompt(job_description: str, blind_mode: bool = False) -> str:
    return _ANALYSIS_TEMPLATE.format(
        job_description=job_description,
        blind_block=_BLIND_MODE_BLOCK if blind_mode else "",
    )


def analysis_system_instruction(blind_mode: bool = False) -> str:
    return BLIND_RECRUITER_SYSTEM_INSTRUCTION if blind_mode else RECRUITER_SYSTEM_INSTRUCTION


def filter_prompt(query: str, summaries: List[Dict[str, object]]) -> str:
    return (
        f'User Query: "{query}"\n\n'
        "Candidate Pool:\n"
        f"{json.dumps(summaries, indent=2)}\n\n"
        "Task: Return a JSON array of candidate IDs that match the user's natural language query.\n"
        'Be smart about synonyms (e.g. if user asks for "React", match "Frontend" or "JS").\n'
        'If the user specifies logic like "Score > 80", strictly follow it.'
    )


def chat_system_instruction(context: Optional[str] = None) -> str:
    """System instruction for the assistant, grounded in ``context`` when given."""
    instruction = (
        'You are a helpful AI assistant inside a recruitment application called "RecruiterOS".\n'
        "You have access to the current candidate pipeline data."
    )
    if context:
        instruction += (
            "\n\nCURRENT CANDIDATE DATA (Use this to answer questions):\n"
            f"{context}\n\n"
            "INSTRUCTIONS:\n"
            "- You can compare candidates, summarize their strengths, or suggest interview questions based on their profiles.\n"
            "- If the user asks about something not in the data, just say you don't know."
        )
    return instruction

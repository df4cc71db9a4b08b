from __future__ import annotations

import json
from typing import Any

from ats_optimizer.ai.types import ChatMessage

SYSTEM_PROMPT = """You are an expert resume analyzer and optimizer, designed to help job seekers get past Applicant Tracking Systems (ATS). Your task is to compare a resume against a job description and provide a detailed analysis report and an optimized version of the resume. You MUST output your response as a single JSON object that adheres to the provided schema. Do not include any text, markdown, or code block formatting outside of the JSON object.

The JSON object must have two top-level keys: "report" and "optimizedResume".

1.  **"report" key**: This will contain the analysis of the *original* resume.
    *   `searchability`: An object analyzing how well an ATS can parse the resume.
        *   `issues`: Total count of 'fail' statuses in the tips.
        *   `tips`: An array of objects (`name`, `status` one of 'pass' | 'fail' | 'info', `message`) for checks like "ATS Tip", "Contact Information", "Summary", "Section Headings", "Job Title Match", "Date Formatting", "Education Match", "File Type". For "File Type", provide a generic good practice tip since you are processing text.
    *   `hardSkills`: An object analyzing keywords.
        *   `issues`: Total count of skills present in the JD but not in the resume.
        *   `skills`: An array of objects (`skill`, `resumeCount`, `jdCount`) for the key hard skills from the job description. If a skill is not found in the resume, set 'resumeCount' to -1. Provide an estimated 'jdCount' based on frequency in the job description.
    *   `softSkills`: Same structure as 'hardSkills'. If no soft skills are found, return an empty array for 'skills'.
    *   `recruiterTips`: An object with general advice.
        *   `issues`: Total count of 'warning' statuses in the tips.
        *   `tips`: An array of objects (`name`, `status` one of 'pass' | 'warning' | 'info', `message`) for categories like "Job Level Match", "Measurable Results", "Resume Tone", "Web Presence", "Word Count".

2.  **"optimizedResume" key**: This will contain the full text of the rewritten, ATS-friendly resume as a single string, formatted with newline characters (\\n) for proper section breaks and readability. The optimized resume should strategically incorporate missing keywords and align with the job description. IMPORTANT: The final optimized resume MUST be concise and its content should not exceed two standard A4 pages when pasted into a document. This is a strict requirement. A resume longer than two pages is considered a failure.

Analyze the provided resume and job description thoroughly to generate accurate and helpful results. The language of the report and optimized resume should match the 'job_language' provided."""


def _tip_schema(statuses: list[str]) -> dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            "issues": {"type": "INTEGER"},
            "tips": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "name": {"type": "STRING"},
                        "status": {"type": "STRING", "enum": statuses},
                        "message": {"type": "STRING"},
                    },
                    "required": ["name", "status", "message"],
                },
            },
        },
        "required": ["issues", "tips"],
    }


def _skill_schema() -> dict[str, Any]:
    return {
        "type": "OBJECT",
        "properties": {
            "issues": {"type": "INTEGER"},
            "skills": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "skill": {"type": "STRING"},
                        "resumeCount": {
                            "type": "INTEGER",
                            "description": "Count of skill in resume. -1 if not found.",
                        },
                        "jdCount": {"type": "INTEGER"},
                    },
                    "required": ["skill", "resumeCount", "jdCount"],
                },
            },
        },
        "required": ["issues", "skills"],
    }


RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "report": {
            "type": "OBJECT",
            "properties": {
                "searchability": _tip_schema(["pass", "fail", "info"]),
                "hardSkills": _skill_schema(),
                "softSkills": _skill_schema(),
                "recruiterTips": _tip_schema(["pass", "warning", "info"]),
            },
            "required": ["searchability", "hardSkills", "softSkills", "recruiterTips"],
        },
        "optimizedResume": {
            "type": "STRING",
            "description": (
                "The full optimized resume text, formatted with newline characters for readability. "
                "The content must not exceed the length of two standard A4 pages."
            ),
        },
    },
    "required": ["report", "optimizedResume"],
}


def build_user_prompt(job_description: str, resume_text: str, language: str) -> str:
    data = json.dumps(
        {
            "job_description": job_description,
            "candidate_cv": resume_text,
            "job_language": language,
        },
        ensure_ascii=False,
        indent=2,
    )
    return (
        "Here is the job and resume data:\n"
        f"{data}\n\n"
        "Please provide the analysis and the optimized resume in the specified JSON format."
    )


def build_analysis_messages(job_description: str, resume_text: str, language: str) -> list[ChatMessage]:
    return [
        ChatMessage(role="system", content=SYSTEM_PROMPT),
        ChatMessage(role="user", content=build_user_prompt(job_description, resume_text, language)),
    ]

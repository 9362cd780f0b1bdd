from __future__ import annotations
from datetime import date
from typing import List, Optional, Sequence

from .schemas import ChatTurn

# Character budgets for user content embedded in each prompt
DIAGRAM_PROMPT_BUDGET = 2000
STUDY_PLAN_CONTENT_BUDGET = 3000
NOTES_CONTENT_BUDGET = 4000
CODE_REVIEW_BUDGET = 4000
CHAT_HISTORY_TURNS = 6

TRUNCATION_MARKER = "...\n(Content truncated for processing)"

DIAGRAM_TYPES = ("flowchart", "sequence", "class", "state", "er", "mindmap", "timeline")

JSON_ONLY = "Return ONLY valid JSON matching this structure. No markdown, no prose, no additional text."


def truncate(text: str, budget: int) -> str:
	text = text or ""
	if len(text) <= budget:
		return text
	return text[:budget] + TRUNCATION_MARKER


def build_diagram_prompt(description: str, diagram_type: Optional[str] = None) -> str:
	kind = diagram_type if diagram_type in DIAGRAM_TYPES else "flowchart"
	return (
		"You are an expert at visualising concepts as Mermaid diagrams for students.\n"
		f"Create a {kind} diagram in valid Mermaid syntax for the following request.\n"
		"Keep node labels short, avoid special characters inside labels, and make sure the code renders in Mermaid 10.\n\n"
		f"REQUEST:\n{truncate(description, DIAGRAM_PROMPT_BUDGET)}\n\n"
		"Respond in JSON with the following structure:\n"
		"{\n"
		'  "mermaidCode": "the Mermaid code, with newlines escaped as \\n",\n'
		f'  "diagramType": "{kind}",\n'
		'  "title": "short diagram title",\n'
		'  "explanation": "one or two sentences explaining the diagram"\n'
		"}\n\n"
		f"{JSON_ONLY}"
	)


def build_study_plan_prompt(
	content: str,
	*,
	days_until_exam: int,
	daily_hours: float,
	difficulty: str,
	today: date,
) -> str:
	"""Render the study-plan prompt.

	``today`` is the only input that varies between otherwise identical requests.
	"""
	total_hours = days_until_exam * daily_hours
	return f"""
Based on the following study material content and parameters, create a comprehensive study plan:

STUDY MATERIAL CONTENT:
{truncate(content, STUDY_PLAN_CONTENT_BUDGET)}

PARAMETERS:
- Today's date: {today.isoformat()}
- Days until exam: {days_until_exam}
- Daily study hours: {daily_hours:g}
- Difficulty level: {difficulty}
- Total available study hours: {total_hours:g}

Please generate a detailed study plan in JSON format with the following structure:

{{
  "subjects": [
    {{
      "name": "Subject Name",
      "hours": number,
      "priority": "High/Medium/Low",
      "topics": ["topic1", "topic2", "topic3"],
      "color": "from-red-500 to-pink-600"
    }}
  ],
  "weeklySchedule": [
    {{
      "week": number,
      "focus": "Learning/Practice/Revision",
      "dailyHours": number,
      "topics": ["topic1", "topic2", "topic3"],
      "goals": ["goal1", "goal2"]
    }}
  ],
  "tips": ["study tip 1", "study tip 2", "study tip 3"],
  "keyTopics": ["important topic 1", "important topic 2", "important topic 3"],
  "revisionSchedule": {{
    "finalWeek": ["final week activity 1", "final week activity 2"],
    "lastThreeDays": ["last day activity 1", "last day activity 2"]
  }}
}}

{JSON_ONLY}
""".strip()


def build_notes_prompt(text: str) -> str:
	return f"""
Please analyze the following text and provide:

1. A comprehensive summary (2-3 paragraphs) that captures the main concepts and key points
2. Create 8-12 flashcards with questions and answers based on the most important information

Format your response as JSON:
{{
  "summary": "Your detailed summary here...",
  "flashcards": [
    {{
      "question": "Question text",
      "answer": "Answer text"
    }}
  ]
}}

{JSON_ONLY}

Text to analyze:
{truncate(text, NOTES_CONTENT_BUDGET)}
""".strip()


def build_code_review_prompt(code: str, language: str) -> str:
	return f"""
You are a senior {language} engineer reviewing a student's code. Assess correctness, readability,
maintainability, performance and security. Be specific and constructive.

CODE ({language}):
{truncate(code, CODE_REVIEW_BUDGET)}

Respond in JSON with the following structure:
{{
  "overallScore": number (0-100),
  "summary": "two sentence overall assessment",
  "issues": [
    {{
      "type": "bug|style|performance|security|maintainability",
      "severity": "high|medium|low",
      "line": number or null,
      "message": "what is wrong",
      "suggestion": "how to fix it"
    }}
  ],
  "suggestions": ["improvement 1", "improvement 2"],
  "positives": ["strength 1", "strength 2"],
  "metrics": {{
    "complexity": number (0-100),
    "maintainability": number (0-100),
    "readability": number (0-100),
    "performance": number (0-100),
    "security": number (0-100)
  }}
}}

{JSON_ONLY}
""".strip()


def build_roadmap_prompt(
	current_skills: Sequence[str],
	goals: Optional[str],
	experience: Optional[str],
	time_available: Optional[float],
	roadmap_summaries: Sequence[str],
) -> str:
	skills = ", ".join(current_skills) if current_skills else "None specified"
	hours = f"{time_available:g}" if time_available else "Not specified"
	available = "\n".join(f"- {line}" for line in roadmap_summaries)
	return f"""
Based on the following user profile, recommend the most suitable learning roadmap(s):

CURRENT SKILLS: {skills}
CAREER GOALS: {goals or 'Not specified'}
EXPERIENCE LEVEL: {experience or 'Beginner'}
TIME AVAILABLE: {hours} hours per week

Available roadmaps:
{available}

Provide a JSON response with:
{{
  "recommendations": [
    {{
      "roadmapId": "string",
      "matchScore": number (0-100),
      "reasoning": "Why this roadmap fits",
      "estimatedCompletion": "time estimate based on available time",
      "prerequisites": ["any missing prerequisites"]
    }}
  ],
  "generalAdvice": "General learning advice for this user"
}}

{JSON_ONLY}
""".strip()


def build_chat_prompt(message: str, history: Sequence[ChatTurn] = ()) -> str:
	lines: List[str] = [
		"You are an AI Study Assistant. Help students with their learning. Be helpful, clear, and educational.",
	]
	recent = [t for t in history if t.content.strip()][-CHAT_HISTORY_TURNS:]
	if recent:
		lines.append("")
		lines.append("Conversation so far:")
		for turn in recent:
			speaker = "Assistant" if turn.role in ("assistant", "ai", "model") else "Student"
			lines.append(f"{speaker}: {turn.content.strip()}")
	lines.append("")
	lines.append(f"Student question: {message}")
	return "\n".join(lines)

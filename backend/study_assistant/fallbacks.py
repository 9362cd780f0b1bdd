"""Provider-free substitutes for every structured result.

These generators are the last line of defence behind the normalizer: they do
no I/O, call no provider and must always return a payload that validates
against the matching schema in :mod:`study_assistant.schemas`.

Everything here is deterministic except the code-review score and metrics,
which are drawn from plausible ranges on purpose so repeated fallbacks do not
look identical. Pass ``rng`` to pin them.
"""
from __future__ import annotations
import math
import random
import re
from collections import Counter
from typing import Any, Dict, List, Optional, Tuple

# Share of total hours for (core concepts, practice, revision)
HOUR_ALLOCATION: Dict[str, Tuple[float, float, float]] = {
	"easy": (0.30, 0.40, 0.30),
	"medium": (0.40, 0.35, 0.25),
	"hard": (0.50, 0.35, 0.15),
}

STOP_WORDS = frozenset(
	"""
	a about above after again against all also am an and any are as at be because been before being below
	between both but by can could did do does doing down during each few for from further had has have having
	he her here hers herself him himself his how however i if in into is it its itself just like may me might
	more most must my myself no nor not now of off on once only or other our ours ourselves out over own same
	shall she should so some such than that the their theirs them themselves then there these they this those
	through to too under until up upon us very was we were what when where which while who whom why will with
	within without would you your yours yourself yourselves one two three many much used use using called
	""".split()
)


def _round_half_up(value: float) -> int:
	return int(math.floor(value + 0.5))


# ---- Study plan ---------------------------------------------------------

def _weekly_schedule(days: int, daily_hours: float) -> List[Dict[str, Any]]:
	weeks = max(1, math.ceil(days / 7))
	schedule: List[Dict[str, Any]] = []
	for week in range(1, weeks + 1):
		progress = week / weeks
		if progress <= 0.6:
			focus = "Learning"
			topics = [
				f"Week {week} - New concept introduction",
				f"Week {week} - Theory and fundamentals",
				f"Week {week} - Basic practice problems",
			]
			goals = ["Master new concepts and theories", "Build strong foundation understanding"]
		elif progress <= 0.8:
			focus = "Practice"
			topics = [
				f"Week {week} - Advanced problem solving",
				f"Week {week} - Mock tests and assessments",
				f"Week {week} - Application of concepts",
			]
			goals = ["Apply learned concepts to problems", "Identify and work on weak areas"]
		else:
			focus = "Revision"
			topics = [
				f"Week {week} - Comprehensive review",
				f"Week {week} - Final mock tests",
				f"Week {week} - Exam strategy preparation",
			]
			goals = ["Consolidate all learning", "Perfect exam technique and timing"]
		schedule.append({
			"week": week,
			"focus": focus,
			"dailyHours": daily_hours,
			"topics": topics,
			"goals": goals,
		})
	return schedule


def study_plan_fallback(days: int, daily_hours: float, difficulty: str) -> Dict[str, Any]:
	days = max(0, int(days))
	daily_hours = max(0.0, float(daily_hours))
	level = difficulty if difficulty in HOUR_ALLOCATION else "medium"
	core, practice, revision = HOUR_ALLOCATION[level]
	total = days * daily_hours
	return {
		"subjects": [
			{
				"name": "Core Concepts",
				"hours": _round_half_up(total * core),
				"priority": "High",
				"topics": ["Fundamental theories", "Key principles", "Basic concepts", "Important definitions"],
				"color": "from-red-500 to-pink-600",
			},
			{
				"name": "Practice Problems",
				"hours": _round_half_up(total * practice),
				"priority": "High",
				"topics": ["Sample questions", "Mock tests", "Problem solving", "Previous year papers"],
				"color": "from-blue-500 to-cyan-600",
			},
			{
				"name": "Review & Revision",
				"hours": _round_half_up(total * revision),
				"priority": "Medium",
				"topics": ["Summary notes", "Quick review", "Final preparation", "Weak area focus"],
				"color": "from-green-500 to-emerald-600",
			},
		],
		"weeklySchedule": _weekly_schedule(days, daily_hours),
		"tips": [
			"Start with the most challenging topics when your mind is fresh",
			"Use active recall techniques instead of passive reading",
			"Take regular breaks using the Pomodoro technique (25min work, 5min break)",
			"Create summary notes and mind maps for quick revision",
			"Practice with mock tests regularly to identify weak areas",
			"Review previously studied material daily to reinforce learning",
			"Stay consistent with your study schedule and track progress",
			f"Focus extra time on {level} difficulty concepts",
		],
		"keyTopics": [
			"Main subject areas from your material",
			"Important formulas and equations",
			"Critical concepts for exam",
			"Common question patterns",
		],
		"revisionSchedule": {
			"finalWeek": [
				"Complete comprehensive mock tests",
				"Review all summary notes and flashcards",
				"Focus intensively on identified weak areas",
				"Practice time management with timed tests",
			],
			"lastThreeDays": [
				"Light revision only - avoid learning new concepts",
				"Quick review of formulas and key points",
				"Relax and maintain confidence",
				"Get adequate sleep and stay healthy",
			],
		},
	}


# ---- Notes --------------------------------------------------------------

_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+")
_WORD = re.compile(r"[A-Za-z][A-Za-z'-]{3,}")


def _sentences(text: str) -> List[str]:
	flat = " ".join((text or "").split())
	return [s.strip() for s in _SENTENCE_SPLIT.split(flat) if s.strip()]


def extract_keywords(text: str, limit: int = 10) -> List[str]:
	"""Most frequent non-stop-words, ties broken by first appearance."""
	counts: Counter = Counter()
	first_seen: Dict[str, int] = {}
	for idx, match in enumerate(_WORD.finditer(text or "")):
		word = match.group(0).lower().strip("'-")
		if len(word) < 4 or word in STOP_WORDS:
			continue
		counts[word] += 1
		first_seen.setdefault(word, idx)
	ranked = sorted(counts, key=lambda w: (-counts[w], first_seen[w]))
	return ranked[:limit]


def notes_fallback(text: str, max_cards: int = 8) -> Dict[str, Any]:
	sentences = _sentences(text)
	summary = " ".join(sentences[:3])
	if len(summary) > 800:
		summary = summary[:797].rstrip() + "..."
	if not summary:
		summary = "No summary could be generated automatically for this material."

	flashcards: List[Dict[str, str]] = []
	for keyword in extract_keywords(text, limit=max_cards):
		context = next((s for s in sentences if keyword in s.lower()), "")
		if len(context) > 300:
			context = context[:297].rstrip() + "..."
		flashcards.append({
			"question": f"What does the material say about \"{keyword}\"?",
			"answer": context or f"\"{keyword}\" is one of the most frequently mentioned terms in the material.",
		})
	if not flashcards:
		flashcards.append({
			"question": "What is the main idea of this material?",
			"answer": summary,
		})
	return {"summary": summary, "flashcards": flashcards}


# ---- Code review --------------------------------------------------------

_DEBUG_OUTPUT = {
	"javascript": re.compile(r"\bconsole\.log\s*\("),
	"typescript": re.compile(r"\bconsole\.log\s*\("),
	"python": re.compile(r"^\s*print\s*\(", re.MULTILINE),
	"java": re.compile(r"System\.out\.println\s*\("),
}


def _code_issues(code: str, language: str) -> List[Dict[str, Any]]:
	issues: List[Dict[str, Any]] = []
	lines = (code or "").splitlines()
	for number, line in enumerate(lines, start=1):
		if len(line) > 120:
			issues.append({
				"type": "style",
				"severity": "low",
				"line": number,
				"message": "Line is longer than 120 characters",
				"suggestion": "Break long expressions over several lines",
			})
			break
	for number, line in enumerate(lines, start=1):
		if re.search(r"\b(TODO|FIXME|XXX)\b", line):
			issues.append({
				"type": "maintainability",
				"severity": "low",
				"line": number,
				"message": "Unresolved TODO/FIXME marker",
				"suggestion": "Resolve or track the pending work before submitting",
			})
			break
	debug = _DEBUG_OUTPUT.get(language)
	if debug is not None and debug.search(code or ""):
		issues.append({
			"type": "style",
			"severity": "low",
			"line": None,
			"message": "Debug output left in the code",
			"suggestion": "Remove debug prints or use a proper logger",
		})
	if language in ("javascript", "typescript") and re.search(r"\bvar\s+\w", code or ""):
		issues.append({
			"type": "maintainability",
			"severity": "medium",
			"line": None,
			"message": "`var` declarations are function-scoped",
			"suggestion": "Prefer `const` or `let`",
		})
	if language == "python" and re.search(r"^\s*except\s*:", code or "", re.MULTILINE):
		issues.append({
			"type": "bug",
			"severity": "medium",
			"line": None,
			"message": "Bare `except:` catches every exception, including KeyboardInterrupt",
			"suggestion": "Catch the specific exceptions you expect",
		})
	issues.append({
		"type": "general",
		"severity": "low",
		"line": None,
		"message": "Automated AI review was unavailable; this is a heuristic review",
		"suggestion": "Ask a peer or instructor to review the logic manually",
	})
	return issues


def code_review_fallback(code: str, language: str, rng: Optional[random.Random] = None) -> Dict[str, Any]:
	rng = rng or random.Random()
	language = (language or "").strip().lower()
	lines = [line for line in (code or "").splitlines() if line.strip()]
	issues = _code_issues(code, language)
	# One real finding costs a few points; the final "manual review" entry is informational
	penalty = 4 * (len(issues) - 1)
	score = max(0, min(100, rng.randint(68, 82) - penalty))
	comment_lines = sum(1 for line in lines if line.lstrip().startswith(("#", "//", "/*", "*")))

	positives = ["Code is submitted in a single, self-contained snippet"]
	if comment_lines:
		positives.append("Includes comments that explain intent")
	if lines and all(len(line) <= 120 for line in lines):
		positives.append("Line lengths are kept readable")

	suggestions = [
		"Add tests that cover edge cases and invalid input",
		"Use descriptive names for variables and functions",
	]
	if len(lines) > 40:
		suggestions.append("Split long code into smaller functions with a single responsibility")

	return {
		"overallScore": score,
		"scoreLabel": "Estimated score (automated heuristic review, not AI-generated)",
		"summary": (
			f"Heuristic review of {len(lines)} non-empty line(s) of {language or 'code'}. "
			"The AI reviewer could not produce a structured result, so these findings are approximate."
		),
		"issues": issues,
		"suggestions": suggestions,
		"positives": positives,
		"metrics": {
			"complexity": rng.randint(55, 85),
			"maintainability": rng.randint(60, 85),
			"readability": rng.randint(60, 90),
			"performance": rng.randint(60, 85),
			"security": rng.randint(65, 90),
		},
		"linesOfCode": len(lines),
	}


# ---- Diagram ------------------------------------------------------------

_LABEL_UNSAFE = re.compile(r"[^A-Za-z0-9 ,'-]")


def _key_phrases(text: str, limit: int = 6) -> List[str]:
	parts = re.split(r"[,.;:\n]|\bthen\b|\band\b|->|=>", text or "", flags=re.IGNORECASE)
	phrases: List[str] = []
	for part in parts:
		label = " ".join(_LABEL_UNSAFE.sub(" ", part).split())[:40].strip()
		if label and label.lower() not in (p.lower() for p in phrases):
			phrases.append(label)
		if len(phrases) >= limit:
			break
	return phrases


def diagram_fallback(description: str, diagram_type: Optional[str] = None) -> Dict[str, Any]:
	phrases = _key_phrases(description)
	if len(phrases) < 2:
		phrases = (phrases or ["Topic"]) + ["Key ideas", "Summary"]
	lines = ["flowchart TD"]
	for idx, phrase in enumerate(phrases):
		lines.append(f"    N{idx}[\"{phrase}\"]")
	for idx in range(len(phrases) - 1):
		lines.append(f"    N{idx} --> N{idx + 1}")
	return {
		"mermaidCode": "\n".join(lines),
		"diagramType": "flowchart",
		"requestedType": diagram_type or "flowchart",
		"title": phrases[0],
		"explanation": "A simple flow of the main steps in your description. Refine the prompt for a more detailed diagram.",
	}


# ---- Roadmap recommendation ---------------------------------------------

def roadmap_fallback(experience: Optional[str], time_available: Optional[float]) -> Dict[str, Any]:
	beginner = (experience or "Beginner").strip().lower() == "beginner"
	if time_available and time_available > 0:
		estimate = f"{math.ceil(300 / (time_available * 4))} months"
	else:
		estimate = "4-6 months"
	return {
		"recommendations": [
			{
				"roadmapId": "frontend" if beginner else "fullstack",
				"matchScore": 85,
				"reasoning": "Good starting point based on your experience level",
				"estimatedCompletion": estimate,
				"prerequisites": [],
			}
		],
		"generalAdvice": "Start with fundamentals and build projects to reinforce learning",
	}

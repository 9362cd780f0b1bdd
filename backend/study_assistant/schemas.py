from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel, ConfigDict, Field


class FeatureKind(str, Enum):
	DIAGRAM = "diagram"
	STUDY_PLAN = "study_plan"
	NOTES = "notes"
	CODE_REVIEW = "code_review"
	ROADMAP = "roadmap"


# ---- Structured results -------------------------------------------------
# Extra keys returned by the provider are kept; only the fields the frontend
# renders are enforced.

class _Result(BaseModel):
	model_config = ConfigDict(extra="allow", allow_inf_nan=False)


class DiagramResult(_Result):
	mermaidCode: str = Field(min_length=1)
	diagramType: str = "flowchart"
	title: str = ""
	explanation: str = ""


class StudySubject(_Result):
	name: str
	hours: float = Field(ge=0)
	priority: str = "Medium"
	topics: List[str] = Field(default_factory=list)


class WeeklyScheduleEntry(_Result):
	week: int
	focus: str
	topics: List[str] = Field(default_factory=list)
	goals: List[str] = Field(default_factory=list)


class StudyPlanResult(_Result):
	subjects: List[StudySubject]
	weeklySchedule: List[WeeklyScheduleEntry]
	tips: List[str] = Field(default_factory=list)
	keyTopics: List[str] = Field(default_factory=list)


class Flashcard(_Result):
	question: str
	answer: str


class NotesResult(_Result):
	summary: str
	flashcards: List[Flashcard]


class ReviewIssue(_Result):
	type: str = "general"
	severity: str = "medium"
	line: Optional[int] = None
	message: str
	suggestion: str = ""


class CodeReviewResult(_Result):
	overallScore: float = Field(ge=0, le=100)
	issues: List[ReviewIssue]
	suggestions: List[str]
	positives: List[str]
	metrics: Dict[str, float]
	summary: str = ""


class RoadmapRecommendation(_Result):
	roadmapId: str
	matchScore: float = Field(default=0, ge=0, le=100)
	reasoning: str = ""
	estimatedCompletion: str = ""
	prerequisites: List[str] = Field(default_factory=list)


class RoadmapRecommendationResult(_Result):
	recommendations: List[RoadmapRecommendation]
	generalAdvice: str = ""


RESULT_SCHEMAS: Dict[FeatureKind, Type[BaseModel]] = {
	FeatureKind.DIAGRAM: DiagramResult,
	FeatureKind.STUDY_PLAN: StudyPlanResult,
	FeatureKind.NOTES: NotesResult,
	FeatureKind.CODE_REVIEW: CodeReviewResult,
	FeatureKind.ROADMAP: RoadmapRecommendationResult,
}


# ---- Request bodies -----------------------------------------------------
# Required fields default to empty so that the route can answer with the
# 400 envelope instead of FastAPI's 422.

class DiagramRequest(BaseModel):
	prompt: str = ""
	diagramType: Optional[str] = None


class NotesTextRequest(BaseModel):
	text: str = ""


class CodeReviewRequest(BaseModel):
	code: str = ""
	language: str = ""


class ChatTurn(BaseModel):
	role: str = "user"
	content: str = ""


class ChatRequest(BaseModel):
	message: str = ""
	sessionId: Optional[str] = None
	conversationHistory: List[ChatTurn] = Field(default_factory=list)


class RoadmapRecommendRequest(BaseModel):
	currentSkills: List[str] = Field(default_factory=list)
	goals: Optional[str] = None
	experience: Optional[str] = None
	timeAvailable: Optional[float] = None


class PlanProgressUpdate(BaseModel):
	completedHours: Optional[float] = None
	completedTopics: List[str] = Field(default_factory=list)
	currentWeek: Optional[int] = None
	studySession: Optional[Dict[str, Any]] = None


class RoadmapProgressUpdate(BaseModel):
	stepId: Optional[int] = None
	completed: bool = False
	timeSpent: Optional[float] = None

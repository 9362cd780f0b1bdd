from __future__ import annotations
import logging
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ..errors import ValidationError
from ..extraction import read_upload_text
from ..fallbacks import HOUR_ALLOCATION, study_plan_fallback
from ..gemini_client import TextGenerator
from ..pipeline import generate_structured, get_generator
from ..prompts import build_study_plan_prompt
from ..schemas import FeatureKind, PlanProgressUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/planner", tags=["planner"])

MAX_DAILY_HOURS = 24
MAX_DAYS_UNTIL_EXAM = 730


def _today() -> date:
	return date.today()


def parse_exam_date(value: str) -> date:
	try:
		return date.fromisoformat(value.strip()[:10])
	except ValueError:
		raise ValidationError("Exam date must be a valid date (YYYY-MM-DD)")


def parse_study_hours(value: str) -> float:
	try:
		hours = float(value)
	except (TypeError, ValueError):
		raise ValidationError("Daily study hours must be a number")
	if not 0 < hours <= MAX_DAILY_HOURS:
		raise ValidationError(f"Daily study hours must be between 0 and {MAX_DAILY_HOURS}")
	return hours


@router.post("/create-plan")
async def create_plan(
	file: Optional[UploadFile] = File(default=None),
	examDate: str = Form(default=""),
	studyHours: str = Form(default=""),
	difficulty: str = Form(default="medium"),
	generator: TextGenerator = Depends(get_generator),
):
	try:
		if file is None or not file.filename:
			raise ValidationError("File is required for study plan generation")
		if not examDate.strip():
			raise ValidationError("Exam date is required")
		if not studyHours.strip():
			raise ValidationError("Daily study hours are required")

		exam_day = parse_exam_date(examDate)
		daily_hours = parse_study_hours(studyHours)
		level = (difficulty or "medium").strip().lower()
		if level not in HOUR_ALLOCATION:
			raise ValidationError("Difficulty must be one of easy, medium, hard")
		today = _today()
		days_until_exam = (exam_day - today).days
		if days_until_exam <= 0:
			raise ValidationError("Exam date must be in the future")
		if days_until_exam > MAX_DAYS_UNTIL_EXAM:
			raise ValidationError(f"Exam date must be within {MAX_DAYS_UNTIL_EXAM} days")
		logger.info("Days until exam: %d, study hours: %g, difficulty: %s", days_until_exam, daily_hours, level)

		content = await read_upload_text(file)
		prompt = build_study_plan_prompt(
			content,
			days_until_exam=days_until_exam,
			daily_hours=daily_hours,
			difficulty=level,
			today=today,
		)
		study_plan, _ = await generate_structured(
			generator,
			FeatureKind.STUDY_PLAN,
			prompt,
			lambda: study_plan_fallback(days_until_exam, daily_hours, level),
			failure_message="Failed to generate study plan",
		)
	finally:
		if file is not None:
			await file.close()

	now = datetime.now(timezone.utc).isoformat()
	study_plan.update({
		"examDate": exam_day.isoformat(),
		"daysUntilExam": days_until_exam,
		"totalHours": days_until_exam * daily_hours,
		"difficulty": level,
		"fileName": file.filename,
		"createdAt": now,
	})
	return {
		"success": True,
		"studyPlan": study_plan,
		"message": "Study plan generated successfully",
		"timestamp": now,
	}


# Progress tracking is not persisted; these endpoints return placeholder data.

@router.get("/progress/{plan_id}")
async def get_progress(plan_id: str):
	return {
		"success": True,
		"message": "Progress tracking ready for implementation",
		"progress": {
			"planId": plan_id,
			"completedHours": 0,
			"completedTopics": [],
			"currentWeek": 1,
			"overallProgress": 0,
			"lastStudySession": None,
			"streak": 0,
		},
	}


@router.post("/progress/{plan_id}")
async def update_progress(plan_id: str, update: PlanProgressUpdate):
	logger.info("Progress update for plan %s: %s", plan_id, update.model_dump())
	return {
		"success": True,
		"message": "Progress updated successfully",
		"updatedProgress": {
			"completedHours": update.completedHours or 0,
			"completedTopics": update.completedTopics,
			"currentWeek": update.currentWeek or 1,
			"lastUpdate": datetime.now(timezone.utc).isoformat(),
		},
	}

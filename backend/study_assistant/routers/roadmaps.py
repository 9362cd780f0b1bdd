from __future__ import annotations
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ..errors import ApiError
from ..fallbacks import roadmap_fallback
from ..gemini_client import TextGenerator
from ..pipeline import generate_structured, get_generator
from ..prompts import build_roadmap_prompt
from ..schemas import FeatureKind, RoadmapProgressUpdate, RoadmapRecommendRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/roadmaps", tags=["roadmaps"])


def _roadmap(id_: str, title: str, category: str, description: str, difficulty: str, duration: str,
		students: str, rating: float,
		color: str, icon: str, skills: List[str], total_steps: int, hours: int,
		prerequisites: List[str], outcomes: List[str]) -> Dict[str, Any]:
	return {
		"id": id_,
		"title": title,
		"category": category,
		"description": description,
		"difficulty": difficulty,
		"duration": duration,
		"students": students,
		"rating": rating,
		"color": color,
		"icon": icon,
		"skills": skills,
		"totalSteps": total_steps,
		"estimatedHours": hours,
		"prerequisites": prerequisites,
		"outcomes": outcomes,
	}


ROADMAPS: List[Dict[str, Any]] = [
	_roadmap(
		"fullstack", "Full Stack Developer", "development",
		"Complete path from frontend to backend development", "Intermediate", "8-12 months", "45.2k", 4.8,
		"from-blue-500 to-cyan-500", "Globe",
		["HTML/CSS", "JavaScript", "React", "Node.js", "Database", "DevOps"], 12, 400,
		["Basic programming knowledge", "Computer fundamentals"],
		["Build full-stack applications", "Deploy to production", "Work with databases"],
	),
	_roadmap(
		"ai-ml", "AI & Machine Learning", "data",
		"Master artificial intelligence and machine learning concepts", "Advanced", "10-15 months", "32.8k", 4.9,
		"from-purple-500 to-pink-500", "Brain",
		["Python", "Statistics", "ML Algorithms", "Deep Learning", "TensorFlow", "Data Analysis"], 15, 600,
		["Python programming", "Statistics basics", "Linear algebra"],
		["Build ML models", "Deploy AI applications", "Data analysis expertise"],
	),
	_roadmap(
		"cybersecurity", "Cybersecurity Specialist", "security",
		"Comprehensive cybersecurity and ethical hacking path", "Advanced", "6-10 months", "28.1k", 4.7,
		"from-red-500 to-orange-500", "Shield",
		["Network Security", "Penetration Testing", "Cryptography", "Security Analysis", "Risk Management"], 10, 350,
		["Networking basics", "Operating systems", "Programming fundamentals"],
		["Conduct security audits", "Implement security protocols", "Incident response"],
	),
	_roadmap(
		"frontend", "Frontend Developer", "development",
		"Modern frontend development with React and advanced tools", "Beginner", "4-6 months", "67.5k", 4.6,
		"from-green-500 to-emerald-500", "Code",
		["HTML5", "CSS3", "JavaScript", "React", "TypeScript", "Testing"], 8, 250,
		["Basic computer skills", "Web browsing knowledge"],
		["Build responsive websites", "Create interactive UIs", "Modern development workflow"],
	),
	_roadmap(
		"mobile-dev", "Mobile App Developer", "mobile",
		"Cross-platform mobile development with React Native", "Intermediate", "6-8 months", "23.7k", 4.5,
		"from-indigo-500 to-purple-500", "Smartphone",
		["React Native", "Mobile UI/UX", "API Integration", "App Store", "Push Notifications"], 9, 320,
		["JavaScript knowledge", "React basics", "Mobile app concepts"],
		["Build mobile apps", "Publish to app stores", "Cross-platform development"],
	),
	_roadmap(
		"data-science", "Data Scientist", "data",
		"Complete data science journey from basics to advanced analytics", "Intermediate", "8-12 months", "41.3k", 4.8,
		"from-yellow-500 to-orange-500", "TrendingUp",
		["Python", "Statistics", "Data Visualization", "SQL", "Machine Learning", "Big Data"], 11, 450,
		["Statistics basics", "Programming fundamentals", "Mathematics"],
		["Analyze complex data", "Build predictive models", "Data-driven insights"],
	),
]

ROADMAP_DETAILS: Dict[str, Dict[str, Any]] = {
	"fullstack": {
		"steps": [
			{
				"id": 1,
				"title": "Web Fundamentals",
				"description": "HTML, CSS, and basic web concepts",
				"duration": "2-3 weeks",
				"difficulty": "Beginner",
				"topics": ["HTML5 Semantic Elements", "CSS Grid & Flexbox", "Responsive Design", "Web Accessibility"],
				"resources": [
					{"name": "MDN Web Docs", "url": "https://developer.mozilla.org", "type": "documentation"},
					{"name": "FreeCodeCamp", "url": "https://freecodecamp.org", "type": "course"},
				],
				"projects": [
					{"name": "Personal Portfolio", "description": "Create a responsive personal website"},
					{"name": "Landing Page", "description": "Build a modern landing page"},
				],
				"quiz": {"questions": 15, "passingScore": 80},
			},
			{
				"id": 2,
				"title": "JavaScript Essentials",
				"description": "Core JavaScript programming concepts",
				"duration": "3-4 weeks",
				"difficulty": "Beginner",
				"topics": ["ES6+ Features", "DOM Manipulation", "Async Programming", "Error Handling"],
				"resources": [
					{"name": "JavaScript.info", "url": "https://javascript.info", "type": "tutorial"},
					{"name": "Eloquent JavaScript", "url": "https://eloquentjavascript.net", "type": "book"},
				],
				"projects": [
					{"name": "To-Do App", "description": "Build an interactive todo application"},
					{"name": "Weather App", "description": "Weather app with API integration"},
				],
				"quiz": {"questions": 20, "passingScore": 75},
			},
			{
				"id": 3,
				"title": "React Fundamentals",
				"description": "Learn React library and component-based architecture",
				"duration": "4-5 weeks",
				"difficulty": "Intermediate",
				"topics": ["Components & Props", "State Management", "Hooks", "Context API"],
				"resources": [
					{"name": "React Documentation", "url": "https://react.dev", "type": "documentation"},
					{"name": "React Tutorial", "url": "https://react.dev/tutorial", "type": "tutorial"},
				],
				"projects": [
					{"name": "React Blog", "description": "Build a blog with React and routing"},
					{"name": "E-commerce Frontend", "description": "Create a shopping cart interface"},
				],
				"quiz": {"questions": 25, "passingScore": 80},
			},
		],
	},
}


@router.get("")
async def list_roadmaps():
	return {"success": True, "roadmaps": ROADMAPS, "total": len(ROADMAPS)}


@router.get("/categories/list")
async def list_categories():
	counts: Dict[str, int] = {}
	for roadmap in ROADMAPS:
		counts[roadmap["category"]] = counts.get(roadmap["category"], 0) + 1
	names = {"development": "Development", "security": "Security", "data": "Data Science", "mobile": "Mobile"}
	categories = [{"id": "all", "name": "All Roadmaps", "count": len(ROADMAPS)}]
	categories += [{"id": cid, "name": names.get(cid, cid.title()), "count": n} for cid, n in counts.items()]
	return {"success": True, "categories": categories}


@router.post("/recommend")
async def recommend(req: RoadmapRecommendRequest, generator: TextGenerator = Depends(get_generator)):
	summaries = [f"{r['title']} (id: {r['id']}, {r['duration']}, {r['difficulty']})" for r in ROADMAPS]
	prompt = build_roadmap_prompt(req.currentSkills, req.goals, req.experience, req.timeAvailable, summaries)
	recommendations, _ = await generate_structured(
		generator,
		FeatureKind.ROADMAP,
		prompt,
		lambda: roadmap_fallback(req.experience, req.timeAvailable),
		failure_message="Failed to generate recommendations",
	)
	return {
		"success": True,
		"recommendations": recommendations,
		"basedOn": req.model_dump(),
	}


@router.get("/{roadmap_id}")
async def roadmap_details(roadmap_id: str):
	details = ROADMAP_DETAILS.get(roadmap_id)
	if details is None:
		raise ApiError("Roadmap not found", status_code=404)
	return {"success": True, "roadmapId": roadmap_id, "details": details}


# Progress is not persisted; these endpoints return placeholder data.

@router.get("/{roadmap_id}/progress/{user_id}")
async def get_roadmap_progress(roadmap_id: str, user_id: str):
	roadmap = next((r for r in ROADMAPS if r["id"] == roadmap_id), None)
	if roadmap is None:
		raise ApiError("Roadmap not found", status_code=404)
	return {
		"success": True,
		"progress": {
			"roadmapId": roadmap_id,
			"userId": user_id,
			"overallProgress": 0,
			"completedSteps": [],
			"currentStep": 1,
			"totalSteps": roadmap["totalSteps"],
			"hoursSpent": 0,
			"achievements": [],
			"weeklyActivity": [],
		},
	}


@router.post("/{roadmap_id}/progress/{user_id}")
async def update_roadmap_progress(roadmap_id: str, user_id: str, update: RoadmapProgressUpdate):
	logger.info(
		"Progress for user %s in roadmap %s: step %s completed=%s, %s minutes",
		user_id, roadmap_id, update.stepId, update.completed, update.timeSpent,
	)
	return {
		"success": True,
		"message": "Progress updated successfully",
		"updatedAt": datetime.now(timezone.utc).isoformat(),
	}

"""
Coaching advisor: the cached AI operations.

Each public method builds a prompt, then goes through
ResponseCache.get_or_compute under its operation name, so a repeated call
with the same parameters is served from the cache instead of the model.
The parameter dict passed in is the cache key material.
"""

from __future__ import annotations

import json
from typing import Any

import structlog

from touchline.core.cache.manager import ResponseCache
from touchline.providers.base import LLMClient

logger = structlog.stdlib.get_logger()


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2, default=str)


def _listing(items: list[str]) -> str:
    return ", ".join(items) if items else "none"


class CoachingAdvisor:
    """LLM-backed analyses for players, teams and parents, cached per operation."""

    def __init__(self, cache: ResponseCache, llm: LLMClient) -> None:
        self.cache = cache
        self.llm = llm

    async def _run(
        self,
        operation: str,
        params: dict[str, Any],
        *,
        system: str,
        prompt: str,
        fallback: str,
        temperature: float | None = None,
        user_id: int | None = None,
    ) -> str:
        async def compute() -> str:
            await logger.adebug("advisor.compute", operation=operation, user_id=user_id)
            text = await self.llm.invoke(
                [
                    {"role": "system", "content": system},
                    {"role": "user", "content": prompt},
                ],
                temperature=temperature,
            )
            return text or fallback

        return await self.cache.get_or_compute(operation, params, compute, user_id=user_id)

    # Player analysis

    async def analyze_player_performance(
        self, player: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """player: name, position, age, age_group, recent_stats."""
        prompt = (
            f"Analyze the performance of {player['name']} "
            f"({player['position']}, age {player['age']}, {player['age_group']}).\n\n"
            f"Recent performance data:\n{_dump(player.get('recent_stats', []))}\n\n"
            "Cover: overall rating (1-10) with explanation, 3-5 key strengths, "
            "3-5 areas for improvement, development recommendations, position "
            "suitability, comparison with age-group standards, injury risk from "
            "workload, and immediate next steps. Be specific and constructive."
        )
        return await self._run(
            "playerAnalysis",
            player,
            system="You are an expert football coach and performance analyst.",
            prompt=prompt,
            fallback="Unable to generate analysis.",
            user_id=user_id,
        )

    async def predict_injury_risk(
        self, player: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """player: name, age, recent_workload, injury_history."""
        prompt = (
            f"Assess injury risk for {player['name']} (age {player['age']}).\n\n"
            f"Workload, last 4 weeks:\n{_dump(player.get('recent_workload', []))}\n\n"
            f"Injury history:\n{_dump(player.get('injury_history', []))}\n\n"
            "Give a risk level (low/medium/high with a percentage), risk factors, "
            "warning signs, prevention steps, load management changes and recovery "
            "needs. Be conservative; player safety comes first."
        )
        return await self._run(
            "injuryPrediction",
            player,
            system="You are a sports medicine expert specializing in injury prevention.",
            prompt=prompt,
            fallback="Unable to predict injury risk.",
            temperature=0.5,
            user_id=user_id,
        )

    async def recommend_optimal_position(
        self, player: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """player: name, current_position, skill_scores, physical_attributes, playing_style."""
        prompt = (
            f"Recommend the best position for {player['name']}, currently a "
            f"{player['current_position']}.\n\n"
            f"Skill scores (1-10):\n{_dump(player.get('skill_scores', {}))}\n\n"
            f"Physical attributes:\n{_dump(player.get('physical_attributes', {}))}\n\n"
            f"Playing style: {player.get('playing_style', 'unknown')}\n\n"
            "Give a primary position with confidence, 2-3 alternatives, the tactical "
            "role (e.g. box-to-box midfielder), skills to develop and comparable "
            "professional archetypes."
        )
        return await self._run(
            "playerAnalysis",
            player,
            system="You are a tactical analyst and player development expert.",
            prompt=prompt,
            fallback="Unable to recommend position.",
            user_id=user_id,
        )

    # Training

    async def generate_training_plan(
        self, player: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """player: name, position, age_group, strengths, weaknesses, available_hours."""
        prompt = (
            f"Create a 4-week training plan for {player['name']} "
            f"({player['position']}, {player['age_group']}), "
            f"{player['available_hours']} hours per week.\n\n"
            f"Strengths: {_listing(player.get('strengths', []))}\n"
            f"Weaknesses: {_listing(player.get('weaknesses', []))}\n\n"
            "Include the weekly structure, named drills with duration and "
            "progression, technical, physical and tactical focus, measurable "
            "milestones and a recovery schedule. Work on weaknesses while keeping "
            "strengths sharp."
        )
        return await self._run(
            "trainingPlan",
            player,
            system="You are an expert football coach specializing in player development.",
            prompt=prompt,
            fallback="Unable to generate training plan.",
            user_id=user_id,
        )

    async def recommend_drills(
        self,
        focus_area: str,
        age_group: str,
        skill_level: str,
        *,
        user_id: int | None = None,
    ) -> str:
        # Drills share the trainingPlan category so training updates clear them too
        params = {"focus_area": focus_area, "age_group": age_group, "skill_level": skill_level}
        prompt = (
            "Recommend 5-7 football drills.\n\n"
            f"Focus area: {focus_area}\nAge group: {age_group}\nSkill level: {skill_level}\n\n"
            "For each drill give the setup (equipment, space, players), "
            "step-by-step instructions, duration, progressions, regressions, key "
            "coaching points and common mistakes. Keep them age-appropriate."
        )
        return await self._run(
            "trainingPlan",
            params,
            system="You are a professional football coach with expertise in training methodologies.",
            prompt=prompt,
            fallback="Unable to recommend drills.",
            user_id=user_id,
        )

    # Tactics

    async def generate_match_strategy(
        self, match: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """match: our_team, opponent_team, importance, conditions."""
        prompt = (
            f"Build a match strategy.\n\nOur team:\n{_dump(match['our_team'])}\n\n"
            f"Opponent:\n{_dump(match['opponent_team'])}\n\n"
            f"Match importance: {match['importance']}\nConditions: {match['conditions']}\n\n"
            "Cover formation, tactical approach, key matchups, set pieces, in-game "
            "adjustments when winning, drawing or losing, substitutions, opponent "
            "weaknesses to exploit, our vulnerabilities and pre-match talking points."
        )
        return await self._run(
            "matchStrategy",
            match,
            system="You are a professional football tactical analyst and match strategist.",
            prompt=prompt,
            fallback="Unable to generate match strategy.",
            user_id=user_id,
        )

    async def analyze_opponent(
        self, opponent: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """opponent: team_name, formation, recent_matches, key_players."""
        prompt = (
            f"Scout the opponent {opponent['team_name']} "
            f"(formation {opponent['formation']}).\n\n"
            f"Recent matches:\n{_dump(opponent.get('recent_matches', []))}\n\n"
            f"Key players:\n{_dump(opponent.get('key_players', []))}\n\n"
            "Describe their playing style, strengths, weaknesses, danger men, "
            "tactical patterns, set-piece threats and defensive gaps, and recommend "
            "how to beat them."
        )
        return await self._run(
            "opponentAnalysis",
            opponent,
            system="You are a professional football scout and opposition analyst.",
            prompt=prompt,
            fallback="Unable to analyze opponent.",
            user_id=user_id,
        )

    # Parents, nutrition, video

    async def generate_parent_report(
        self, player: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """player: name, period, performance, attendance, behavior, development."""
        prompt = (
            f"Write a progress report for the parents of {player['name']} "
            f"covering {player['period']}.\n\n"
            f"Performance:\n{_dump(player.get('performance'))}\n"
            f"Attendance:\n{_dump(player.get('attendance'))}\n"
            f"Behavior:\n{_dump(player.get('behavior'))}\n"
            f"Development:\n{_dump(player.get('development'))}\n\n"
            "Warm, specific and encouraging: highlights, technical, tactical and "
            "physical progress, attitude and teamwork, areas for growth, next steps "
            "and practice ideas for home."
        )
        return await self._run(
            "parentReport",
            player,
            system="You are an experienced youth football coach writing to parents.",
            prompt=prompt,
            fallback="Unable to generate parent report.",
            temperature=0.8,
            user_id=user_id,
        )

    async def generate_meal_plan(
        self, player: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """player: name, age, weight_kg, height_cm, activity_level, goals, dietary_restrictions."""
        prompt = (
            f"Create a nutrition plan for young athlete {player['name']}: age "
            f"{player['age']}, {player['weight_kg']}kg, {player['height_cm']}cm, "
            f"activity level {player['activity_level']}.\n"
            f"Goals: {_listing(player.get('goals', []))}\n"
            f"Dietary restrictions: {_listing(player.get('dietary_restrictions', []))}\n\n"
            "Include daily calories with macros, a sample day of meals, pre- and "
            "post-training and match-day nutrition, hydration and practical tips. "
            "Keep it age-appropriate and family-friendly."
        )
        return await self._run(
            "nutritionPlan",
            player,
            system="You are a sports nutritionist specializing in youth athletes.",
            prompt=prompt,
            fallback="Unable to generate meal plan.",
            temperature=0.6,
            user_id=user_id,
        )

    async def generate_video_insights(
        self, video: dict[str, Any], *, user_id: int | None = None
    ) -> str:
        """video: player_name, session_type, focus, key_moments."""
        prompt = (
            f"Analyze video footage of {video['player_name']} "
            f"({video['session_type']}), focusing on {video['focus']}.\n\n"
            f"Key moments:\n{_dump(video.get('key_moments', []))}\n\n"
            "Give a performance summary, technical, tactical and physical analysis, "
            "highlights and improvement areas referenced by timestamp, coaching "
            "points and drills that address what you saw."
        )
        return await self._run(
            "videoAnalysis",
            video,
            system="You are a video analyst specializing in football performance analysis.",
            prompt=prompt,
            fallback="Unable to generate video insights.",
            user_id=user_id,
        )

"""Prompt construction for the coaching assistant."""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from ..objectives.enums import Category
from ..objectives.ledger import format_number
from ..objectives.models import Objective

BASE_SYSTEM_PROMPT = (
    "You are an intelligent assistant who helps users reach their objectives."
)

CATEGORY_GUIDANCE = {
    Category.SPIRITUAL: (
        "Give Islamic spiritual advice, relevant Quran verses and hadiths. "
        "Encourage religious practice and spiritual connection."
    ),
    Category.PROFESSIONAL: (
        "Give professional advice, career development strategies and resources "
        "to improve professional skills."
    ),
    Category.PERSONAL: (
        "Give personal development advice, habits to adopt and strategies to "
        "reach personal objectives."
    ),
    Category.FINANCE: (
        "Give financial advice, saving and investment strategies, and tips for "
        "managing a budget."
    ),
}

COACH_SYSTEM_PROMPT = "You are an expert in coaching and personal development."


def system_prompt(objective: Optional[Objective]) -> str:
    """System message, specialised by the objective's category when there is one."""
    prompt = BASE_SYSTEM_PROMPT
    if objective is None:
        return prompt

    prompt += (
        f' The user is working on a {objective.category.value} objective: '
        f'"{objective.name}".'
    )
    if objective.description:
        prompt += f" Description: {objective.description}."
    return f"{prompt} {CATEGORY_GUIDANCE[objective.category]}"


def suggestions_prompt(objective: Objective) -> str:
    lines = [
        "Generate 3 concrete suggestions to help reach the following objective:",
        "",
        f"Objective name: {objective.name}",
        f"Category: {objective.category.value}",
        f"Tracking type: {objective.tracking_type.value}",
        f"Cadence: {objective.cadence.value}",
    ]
    if objective.description:
        lines.append(f"Description: {objective.description}")
    if objective.target:
        lines.append(f"Target: {format_number(objective.target)}")
    lines += [
        "",
        "For each suggestion, include:",
        "1. A short title",
        "2. A detailed description",
        "3. Concrete steps to follow",
        "4. Recommended resources (books, websites, apps, etc.)",
        "",
        "Format the suggestions clearly and make sure they are relevant to the "
        "objective's category.",
    ]
    return "\n".join(lines)


def news_items(objective: Objective, now: Optional[datetime] = None) -> list[dict[str, Any]]:
    """Three placeholder news items about the objective's topic."""
    now = now or datetime.now(timezone.utc)
    category = objective.category.value
    return [
        {
            "id": "1",
            "title": f"New trends in {category}",
            "description": (
                f"Discover the latest trends in {category} that could help you "
                f'reach your objective "{objective.name}".'
            ),
            "url": "https://example.com/article1",
            "date": now.isoformat(),
            "source": "Example News",
        },
        {
            "id": "2",
            "title": f"How to improve your {objective.name}",
            "description": (
                f"Experts share their advice to improve your {objective.name} "
                "and reach your objectives faster."
            ),
            "url": "https://example.com/article2",
            "date": (now - timedelta(days=1)).isoformat(),
            "source": "Expert Advice",
        },
        {
            "id": "3",
            "title": f"Recent study on {category}",
            "description": (
                f"A new study reveals interesting findings on {category} that "
                f'could shape your approach to "{objective.name}".'
            ),
            "url": "https://example.com/article3",
            "date": (now - timedelta(days=2)).isoformat(),
            "source": "Research Journal",
        },
    ]

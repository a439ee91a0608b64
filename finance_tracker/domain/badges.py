"""Achievement definitions for the financial health dashboard

Each achievement kind is registered with an unlock predicate and a progress
function over a BadgeContext. Adding an achievement means adding a kind and a
definition to ACHIEVEMENTS; the scorer only calls evaluate_badges.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List
from finance_tracker.domain.models import Badge

FRUGAL_SPEND_RATIO = 0.8  # Stay 20% under total budget
SAVINGS_STAR_RATE = 0.3


class AchievementKind(str, Enum):
    FRUGAL_KING = "frugal-king"
    GOAL_CRUSHER = "goal-crusher"
    DEBT_SLAYER = "debt-slayer"
    SAVINGS_STAR = "savings-star"


@dataclass(frozen=True)
class BadgeContext:
    """Snapshot totals the achievement predicates read"""

    total_budgeted: float
    total_expenses: float
    savings_rate: float
    max_goal_progress: float  # Percentage, unclamped
    any_goal_reached: bool
    has_debt: bool


@dataclass(frozen=True)
class Achievement:
    kind: AchievementKind
    name: str
    description: str
    icon: str
    target_display: str
    is_unlocked: Callable[[BadgeContext], bool]
    progress: Callable[[BadgeContext], float]


def _clamp_percent(value: float) -> float:
    return min(100.0, max(0.0, value))


def _frugal_unlocked(ctx: BadgeContext) -> bool:
    return ctx.total_budgeted > 0 and ctx.total_expenses <= ctx.total_budgeted * FRUGAL_SPEND_RATIO


def _frugal_progress(ctx: BadgeContext) -> float:
    if _frugal_unlocked(ctx):
        return 100.0
    if ctx.total_budgeted <= 0:
        return 0.0
    target = ctx.total_budgeted * FRUGAL_SPEND_RATIO
    return _clamp_percent((ctx.total_budgeted - ctx.total_expenses) / (ctx.total_budgeted - target) * 100)


def _savings_progress(ctx: BadgeContext) -> float:
    return _clamp_percent(ctx.savings_rate / SAVINGS_STAR_RATE * 100)


ACHIEVEMENTS: Dict[AchievementKind, Achievement] = {
    AchievementKind.FRUGAL_KING: Achievement(
        kind=AchievementKind.FRUGAL_KING,
        name="Frugal King",
        description="Stay 20% under total budget",
        icon="Crown",
        target_display="20% Under",
        is_unlocked=_frugal_unlocked,
        progress=_frugal_progress,
    ),
    AchievementKind.GOAL_CRUSHER: Achievement(
        kind=AchievementKind.GOAL_CRUSHER,
        name="Goal Crusher",
        description="Reach a savings goal",
        icon="Target",
        target_display="100% Goal",
        is_unlocked=lambda ctx: ctx.any_goal_reached,
        progress=lambda ctx: _clamp_percent(ctx.max_goal_progress),
    ),
    AchievementKind.DEBT_SLAYER: Achievement(
        kind=AchievementKind.DEBT_SLAYER,
        name="Debt Slayer",
        description="Be debt-free on credit cards",
        icon="Sword",
        target_display="0 Debt",
        is_unlocked=lambda ctx: not ctx.has_debt,
        progress=lambda ctx: 0.0 if ctx.has_debt else 100.0,
    ),
    AchievementKind.SAVINGS_STAR: Achievement(
        kind=AchievementKind.SAVINGS_STAR,
        name="Savings Star",
        description="Achieve 30% savings rate",
        icon="Star",
        target_display="30% Rate",
        is_unlocked=lambda ctx: ctx.savings_rate >= SAVINGS_STAR_RATE,
        progress=_savings_progress,
    ),
}


def evaluate_badges(ctx: BadgeContext) -> List[Badge]:
    """Evaluate every registered achievement, in registration order"""
    return [
        Badge(
            id=achievement.kind.value,
            name=achievement.name,
            description=achievement.description,
            icon=achievement.icon,
            unlocked=achievement.is_unlocked(ctx),
            progress=achievement.progress(ctx),
            target_display=achievement.target_display,
        )
        for achievement in ACHIEVEMENTS.values()
    ]

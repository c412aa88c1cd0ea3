"""Station-visit milestone catalog and token metadata."""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from tubeledger.core.config import settings
from tubeledger.models.models import AchievementMetadata, Attribute

class Rarity(str, Enum):
    COMMON = "Common"
    UNCOMMON = "Uncommon"
    RARE = "Rare"
    EPIC = "Epic"
    LEGENDARY = "Legendary"
    MYTHIC = "Mythic"

@dataclass(frozen=True)
class Milestone:
    visits: int
    name: str
    description: str

    @property
    def id(self) -> str:
        return f"achievement_{self.visits}"

    @property
    def rarity(self) -> Rarity:
        return rarity_for(self.visits)

TOTAL_STATIONS = 270

MILESTONES: Tuple[Milestone, ...] = (
    Milestone(1, "First Steps", "Visit your first tube station"),
    Milestone(10, "Getting Around", "Visit 10 tube stations"),
    Milestone(25, "Tube Explorer", "Visit 25 tube stations"),
    Milestone(50, "London Navigator", "Visit 50 tube stations"),
    Milestone(75, "Underground Veteran", "Visit 75 tube stations"),
    Milestone(100, "Metro Master", "Visit 100 tube stations"),
    Milestone(150, "Tube Network Expert", "Visit 150 tube stations"),
    Milestone(200, "London Underground Legend", "Visit 200 tube stations"),
    Milestone(250, "Almost There", "Visit 250 tube stations"),
    Milestone(TOTAL_STATIONS, "Tube Completionist", f"Visit all {TOTAL_STATIONS} tube stations"),
)

def rarity_for(visits: int) -> Rarity:
    if visits == 1:
        return Rarity.COMMON
    if visits <= 25:
        return Rarity.UNCOMMON
    if visits <= 100:
        return Rarity.RARE
    if visits <= 200:
        return Rarity.EPIC
    if visits <= 250:
        return Rarity.LEGENDARY
    return Rarity.MYTHIC

def get_milestone(achievement_id: str) -> Optional[Milestone]:
    return next((m for m in MILESTONES if m.id == achievement_id), None)

def reached_milestones(current_visits: int) -> List[Milestone]:
    return [m for m in MILESTONES if m.visits <= current_visits]

def build_metadata(milestone: Milestone, symbol: str = settings.TOKEN_SYMBOL) -> AchievementMetadata:
    """Token metadata for a milestone (image rendering is left to clients)."""
    return AchievementMetadata(
        name=f"{milestone.name} Achievement",
        symbol=symbol,
        description=(
            f"{milestone.description}. This achievement token represents your "
            "dedication to exploring the London Underground network."
        ),
        image="",
        attributes=[
            Attribute("Achievement Type", "Station Visit Milestone"),
            Attribute("Required Visits", str(milestone.visits)),
            Attribute("Network", "London Underground"),
            Attribute("Verification Method", "AI + Blockchain"),
            Attribute("Rarity", milestone.rarity.value),
        ],
    )

@dataclass(frozen=True)
class MilestoneProgress:
    current: int
    next: int
    progress: float  # percent of the way from the last reached milestone to the next

def progress_to_next(current_visits: int) -> MilestoneProgress:
    """Progress towards the first milestone not yet reached, capped at 100."""
    previous = 0
    for milestone in MILESTONES:
        if current_visits < milestone.visits:
            span = milestone.visits - previous
            progress = (current_visits - previous) / span * 100
            return MilestoneProgress(current_visits, milestone.visits, min(max(progress, 0.0), 100.0))
        previous = milestone.visits
    return MilestoneProgress(current_visits, TOTAL_STATIONS, 100.0)

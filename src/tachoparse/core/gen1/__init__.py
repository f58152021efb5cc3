from tachoparse.core.gen1.card import CardGen1Blocks
from tachoparse.core.gen1.vu import (
    ActivitiesBlock,
    DetailedSpeedBlock,
    EventsAndFaultsBlock,
    OverviewBlock,
    TechnicalDataBlock,
)

__all__ = [
    "ActivitiesBlock",
    "CardGen1Blocks",
    "DetailedSpeedBlock",
    "EventsAndFaultsBlock",
    "OverviewBlock",
    "TechnicalDataBlock",
]

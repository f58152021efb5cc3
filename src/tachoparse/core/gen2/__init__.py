from tachoparse.core.gen2.card import CardGen2Blocks
from tachoparse.core.gen2.vu import (
    ActivitiesBlock,
    DetailedSpeedBlock,
    EventsAndFaultsBlock,
    OverviewBlock,
    TechnicalDataBlock,
)

__all__ = [
    "ActivitiesBlock",
    "CardGen2Blocks",
    "DetailedSpeedBlock",
    "EventsAndFaultsBlock",
    "OverviewBlock",
    "TechnicalDataBlock",
]

from tachoparse.core.gen2v2.card import CardGen2V2Blocks
from tachoparse.core.gen2v2.vu import ActivitiesBlock, OverviewBlock, TechnicalDataBlock

__all__ = ["ActivitiesBlock", "CardGen2V2Blocks", "OverviewBlock", "TechnicalDataBlock"]

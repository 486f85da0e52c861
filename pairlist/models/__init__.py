from pairlist.models.fields import SnapshotParseError
from pairlist.models.market import MarketInfo, PairType
from pairlist.models.ticker import SortKey, TickerInfo

__all__ = ["MarketInfo", "PairType", "SnapshotParseError", "SortKey", "TickerInfo"]

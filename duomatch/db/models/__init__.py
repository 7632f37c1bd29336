from duomatch.db.models.daily_prize import DailyPrizeEntry, DailyPrizeWinner
from duomatch.db.models.daily_swipe_counts import DailySwipeCount
from duomatch.db.models.daily_tasks import DailyTask, DailyTaskProgress
from duomatch.db.models.matches import Match
from duomatch.db.models.messages import Message
from duomatch.db.models.profiles import Profile
from duomatch.db.models.reports import Report
from duomatch.db.models.swipes import Swipe
from duomatch.db.models.transactions import Transaction

__all__ = [
    "DailyPrizeEntry",
    "DailyPrizeWinner",
    "DailySwipeCount",
    "DailyTask",
    "DailyTaskProgress",
    "Match",
    "Message",
    "Profile",
    "Report",
    "Swipe",
    "Transaction",
]

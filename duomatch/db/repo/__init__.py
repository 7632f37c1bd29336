from duomatch.db.repo.daily_prize_repo import DailyPrizeRepo
from duomatch.db.repo.daily_tasks_repo import DailyTasksRepo
from duomatch.db.repo.matches_repo import MatchesRepo
from duomatch.db.repo.messages_repo import MessagesRepo
from duomatch.db.repo.profiles_repo import ProfilesRepo
from duomatch.db.repo.swipe_counts_repo import SwipeCountsRepo
from duomatch.db.repo.swipes_repo import SwipesRepo
from duomatch.db.repo.transactions_repo import TransactionsRepo

__all__ = [
    "DailyPrizeRepo",
    "DailyTasksRepo",
    "MatchesRepo",
    "MessagesRepo",
    "ProfilesRepo",
    "SwipeCountsRepo",
    "SwipesRepo",
    "TransactionsRepo",
]

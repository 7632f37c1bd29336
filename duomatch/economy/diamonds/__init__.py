from duomatch.economy.diamonds.prize import DailyPrizeService
from duomatch.economy.diamonds.service import DiamondLedger
from duomatch.economy.diamonds.tasks import DailyTasksService

__all__ = ["DailyPrizeService", "DailyTasksService", "DiamondLedger"]

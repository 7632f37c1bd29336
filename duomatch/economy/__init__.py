from duomatch.economy.diamonds import DailyPrizeService, DailyTasksService, DiamondLedger

__all__ = ["DailyPrizeService", "DailyTasksService", "DiamondLedger"]

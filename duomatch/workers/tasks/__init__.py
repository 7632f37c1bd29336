from duomatch.workers.tasks.daily_prize import run_daily_prize_award

__all__ = ["run_daily_prize_award"]

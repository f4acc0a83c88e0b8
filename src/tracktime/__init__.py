"""tracktime: personal time tracker (tasks, one running timer, day/week/month totals)."""

__version__ = "0.1.0"

"""Re-export individual schema modules for easy imports."""

from .schedule import GroceryItem, GroceryListOut, ScheduleOut, ScheduleRequest

__all__ = [
    "GroceryItem",
    "GroceryListOut",
    "ScheduleOut",
    "ScheduleRequest",
]

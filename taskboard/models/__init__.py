from .task import Task, TaskPriority, TaskStatus
from .storage import StorageSlot

# Export all models for easy importing
__all__ = ["Task", "TaskPriority", "TaskStatus", "StorageSlot"]

from memory_jar.db.models.memory import MOODS, Memory
from memory_jar.db.models.user import User

__all__ = ["MOODS", "Memory", "User"]

from store_ratings.models.user import User
from store_ratings.models.store import Store
from store_ratings.models.review import Review

__all__ = ["User", "Store", "Review"]

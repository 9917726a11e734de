from sarradabet.repositories.admins import AdminRepository
from sarradabet.repositories.bets import BetRepository
from sarradabet.repositories.categories import CategoryRepository
from sarradabet.repositories.votes import VoteRepository

__all__ = ["AdminRepository", "BetRepository", "CategoryRepository", "VoteRepository"]

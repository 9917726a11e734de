"""Business rules for each resource, layered over the repositories."""

from sarradabet.services.admins import AdminService
from sarradabet.services.bets import BetService
from sarradabet.services.categories import CategoryService
from sarradabet.services.votes import VoteService

__all__ = ["AdminService", "BetService", "CategoryService", "VoteService"]

"""HTTP routers, one per resource.  Mounted under ``/api/v1``."""

from sarradabet.routers import admin, bets, categories, votes

ALL_ROUTERS = [bets.router, categories.router, votes.router, admin.router]

__all__ = ["ALL_ROUTERS"]

"""Source repository fetch APIs."""

from mysqlprov.models import FetchSpec

from .git import fetch_git

__all__ = ["FetchSpec", "fetch_git"]

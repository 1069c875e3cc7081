"""GitHub connector package."""
from connectors.github import GitHubClient, RepositoryResponse, execute_update

__all__ = ["GitHubClient", "RepositoryResponse", "execute_update"]

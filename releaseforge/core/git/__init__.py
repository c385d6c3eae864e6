"""Git collaborator used by the versioning engine and the tag publisher."""

from releaseforge.core.git.repository import (
    GitRepository,
    RepositoryPort,
    parse_branch_listing,
)

__all__ = ["GitRepository", "RepositoryPort", "parse_branch_listing"]

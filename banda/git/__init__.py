"""Git operations module.

Usage:
    from banda.git import Repository

    repo = Repository(Path.cwd())
    if repo.is_repository() and repo.is_clean():
        print(repo.current_branch())
"""

from banda.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
]

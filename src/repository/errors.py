"""Exceptions raised by the repository layer."""


class RepositoryError(Exception):
    """Base exception for repository operations."""

    pass


class RepoOpenError(RepositoryError):
    """Path is not a recognized repository store."""

    pass


class NotFoundError(RepositoryError):
    """A ref or object does not exist in the store."""

    pass


class CorruptObjectError(RepositoryError):
    """A commit object is missing or could not be parsed."""

    pass


class UnknownBranchError(RepositoryError):
    """A branch name does not match any ref of the repository."""

    def __init__(self, name: str):
        super().__init__(f"no such branch: {name}")
        self.name = name

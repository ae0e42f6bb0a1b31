"""Branch visibility flags driven by user input."""

from collections.abc import Iterable

from common.logger import get_logger
from repository.errors import UnknownBranchError

logger = get_logger(__name__)


class BranchVisibilitySet:
    """Mapping of branch name to a visibility flag.

    Entries only ever come from the repository's branch list; names that
    are not known are rejected rather than silently added.
    """

    def __init__(self) -> None:
        self._flags: dict[str, bool] = {}

    def initialize(
        self,
        all_branches: Iterable[str],
        startup_filter: Iterable[str] | None = None,
    ) -> None:
        """Reset flags for *all_branches*.

        With a non-empty *startup_filter* only the named branches start
        visible; otherwise every branch does.

        Raises:
            UnknownBranchError: If the filter names a branch that does not exist
        """
        branches = list(all_branches)
        wanted = list(startup_filter or [])

        known = set(branches)
        for name in wanted:
            if name not in known:
                raise UnknownBranchError(name)

        if wanted:
            self._flags = {name: name in wanted for name in branches}
        else:
            self._flags = {name: True for name in branches}

    def sync(self, all_branches: Iterable[str]) -> None:
        """Follow a refreshed branch list.

        Surviving branches keep their flag, new branches start visible and
        vanished branches are dropped.
        """
        flags = {name: self._flags.get(name, True) for name in all_branches}
        added = flags.keys() - self._flags.keys()
        removed = self._flags.keys() - flags.keys()
        if added or removed:
            logger.debug(f"Branches added: {sorted(added)}, removed: {sorted(removed)}")
        self._flags = flags

    def toggle(self, branch: str) -> bool | None:
        """Flip the flag of *branch*.

        Unknown branches are ignored.

        Returns:
            The new flag, or None if the branch is unknown
        """
        if branch not in self._flags:
            return None
        self._flags[branch] = not self._flags[branch]
        return self._flags[branch]

    def set_visible(self, branch: str, visible: bool) -> None:
        if branch not in self._flags:
            raise UnknownBranchError(branch)
        self._flags[branch] = visible

    def is_visible(self, branch: str) -> bool:
        return self._flags.get(branch, False)

    def visible_set(self) -> frozenset[str]:
        return frozenset(name for name, flag in self._flags.items() if flag)

    def items(self) -> list[tuple[str, bool]]:
        return sorted(self._flags.items())

    def __contains__(self, branch: object) -> bool:
        return branch in self._flags

    def __len__(self) -> int:
        return len(self._flags)

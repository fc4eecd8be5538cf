"""Lookup of catalog repositories by entry kind."""

from typing import Dict, Iterable, Iterator, List, Union

from ..domain.catalog.repositories import CatalogRepository
from ..domain.catalog.value_objects import EntryKind
from ..exceptions import ValidationError


class RepositoryRegistry:
    """Holds one CatalogRepository per entry kind."""

    def __init__(self, repositories: Iterable[CatalogRepository] = ()):
        self._repositories: Dict[EntryKind, CatalogRepository] = {}
        for repository in repositories:
            self.register(repository)

    def register(self, repository: CatalogRepository) -> None:
        self._repositories[repository.kind] = repository

    def get(self, kind: Union[EntryKind, str]) -> CatalogRepository:
        """Get the repository for a kind, raising ValidationError if none is configured."""
        kind = EntryKind.parse(kind)
        try:
            return self._repositories[kind]
        except KeyError:
            raise ValidationError(f"No repository configured for {kind.value} entries.")

    def kinds(self) -> List[EntryKind]:
        return list(self._repositories)

    def __iter__(self) -> Iterator[CatalogRepository]:
        return iter(self._repositories.values())

    def __len__(self) -> int:
        return len(self._repositories)

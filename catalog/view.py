"""Read-only query helpers over a catalog snapshot.

A :class:`CatalogView` wraps an immutable tuple of assets.  Every filter
returns a new view, so one snapshot can be shared by any number of
concurrent resolution passes without copying or locking.
"""

from collections.abc import Callable, Iterable, Iterator

from models.asset import Asset, AssetStatus, AssetType


def newest_first(assets: Iterable[Asset]) -> list[Asset]:
    """Order by ``created_at`` descending, then ``id`` ascending for a total order."""
    return sorted(assets, key=lambda a: (-a.created_at.timestamp(), a.id))


class CatalogView:
    """Immutable view over the assets of one snapshot."""

    __slots__ = ("_assets",)

    def __init__(self, assets: Iterable[Asset] = ()) -> None:
        self._assets: tuple[Asset, ...] = tuple(assets)

    @classmethod
    def from_records(cls, records: Iterable[dict]) -> "CatalogView":
        """Build a view from raw or normalized snapshot rows."""
        from catalog.ingest import asset_from_record

        return cls(asset_from_record(r) for r in records)

    def __iter__(self) -> Iterator[Asset]:
        return iter(self._assets)

    def __len__(self) -> int:
        return len(self._assets)

    def __repr__(self) -> str:
        return f"CatalogView({len(self._assets)} assets)"

    @property
    def assets(self) -> tuple[Asset, ...]:
        return self._assets

    def by_id(self, asset_id: str) -> Asset | None:
        for asset in self._assets:
            if asset.id == asset_id:
                return asset
        return None

    def where(self, predicate: Callable[[Asset], bool]) -> "CatalogView":
        return CatalogView(a for a in self._assets if predicate(a))

    def of_type(self, asset_type: AssetType | str) -> "CatalogView":
        wanted = AssetType(asset_type)
        return self.where(lambda a: a.type is wanted)

    def with_status(self, *statuses: AssetStatus | str) -> "CatalogView":
        wanted = {AssetStatus(s) for s in statuses}
        return self.where(lambda a: a.status in wanted)

    def for_template(self, names: Iterable[str]) -> "CatalogView":
        wanted = frozenset(names)
        return self.where(lambda a: a.classification.template_name in wanted)

    def legacy(self) -> "CatalogView":
        """Assets lacking both ``template_name`` and ``asset_class``."""
        return self.where(lambda a: a.classification.is_legacy)

    def newest_first(self) -> list[Asset]:
        return newest_first(self._assets)

"""Shared fixtures for the slot resolver unit tests."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from app.templates import load_template
from catalog.view import CatalogView
from models.asset import Asset, AssetStatus, AssetType, classification_for

BASE_TIME = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
def make_asset():
    """Factory for typed assets; every call is one minute newer than the last."""
    counter = itertools.count()

    def _make(
        asset_type: str = "image",
        status: str = "approved",
        theme: str = "",
        tags: tuple = (),
        asset_id: str | None = None,
        created_at: datetime | None = None,
        **classification,
    ) -> Asset:
        n = next(counter)
        asset_id = asset_id or f"asset-{n:03d}"
        return Asset(
            id=asset_id,
            type=AssetType(asset_type),
            status=AssetStatus(status),
            theme=theme,
            tags=tuple(tags),
            classification=classification_for(AssetType(asset_type), **classification),
            url=f"https://cdn.test/{asset_id}",
            created_at=created_at or BASE_TIME + timedelta(minutes=n),
        )

    return _make


@pytest.fixture
def catalog():
    def _catalog(*assets: Asset) -> CatalogView:
        return CatalogView(assets)

    return _catalog


@pytest.fixture(scope="session")
def lullaby():
    return load_template("lullaby")


@pytest.fixture(scope="session")
def name_video():
    return load_template("name-video")

"""Unit tests for GoodsService."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.asyncio import Redis
from sqlalchemy.exc import OperationalError

from src.goods_service.core.cache import LISTING_GOODS, Cache, goods_key
from src.goods_service.core.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    TransientStoreError,
)
from src.goods_service.core.metrics import Metrics
from src.goods_service.core.ranking import NO_SHIFT, Shift
from src.goods_service.models import Goods, Project
from src.goods_service.schemas.goods import GoodsCreate, GoodsRead, GoodsUpdate
from src.goods_service.schemas.pagination import PageParams
from src.goods_service.services import GoodsService

pytestmark = pytest.mark.unit

PROJECT_ID = 1


def make_goods(goods_id: int, priority: int, removed: bool = False) -> Goods:
    return Goods(
        id=goods_id,
        project_id=PROJECT_ID,
        name=f"Item {goods_id}",
        description=f"Item {goods_id}",
        priority=priority,
        removed=removed,
    )


@pytest.fixture
def goods_repo() -> MagicMock:
    repo = MagicMock()
    repo.add = MagicMock()
    repo.get_one = AsyncMock(return_value=None)
    repo.lock_one = AsyncMock(return_value=None)
    repo.count_active = AsyncMock(return_value=0)
    repo.shift = AsyncMock(return_value=[])
    repo.list_active = AsyncMock(return_value=[])
    repo.count = AsyncMock(return_value=0)
    repo.count_removed = AsyncMock(return_value=0)
    return repo


@pytest.fixture
def project_repo() -> MagicMock:
    repo = MagicMock()
    repo.lock = AsyncMock(return_value=Project(id=PROJECT_ID, name="Acme"))
    return repo


@pytest.fixture
def mock_session() -> AsyncMock:
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()

    async def _refresh(obj) -> None:
        if obj.id is None:
            obj.id = 100

    session.refresh = AsyncMock(side_effect=_refresh)
    return session


@pytest.fixture
def service(
    goods_repo: MagicMock,
    project_repo: MagicMock,
    mock_session: AsyncMock,
    mock_redis: Redis,
    metrics: Metrics,
) -> GoodsService:
    return GoodsService(goods_repo, project_repo, mock_session, Cache(ttl=60, metrics=metrics), metrics)


def counter(metrics: Metrics, name: str, **labels: str) -> float:
    return metrics.registry.get_sample_value(name, labels or None) or 0.0


class TestCreate:
    async def test_appends_without_priority(self, service, goods_repo, mock_session) -> None:
        goods_repo.count_active.return_value = 2

        result = await service.create(PROJECT_ID, GoodsCreate(name="Widget"))

        assert result.priority == 3
        assert result.id == 100
        assert result.description == "Widget"
        goods_repo.shift.assert_awaited_once_with(PROJECT_ID, NO_SHIFT)
        goods_repo.add.assert_called_once()
        mock_session.commit.assert_awaited_once()

    async def test_inserts_at_requested_rank(
        self, service, goods_repo, mock_redis: Redis
    ) -> None:
        goods_repo.count_active.return_value = 2
        goods_repo.shift.return_value = [5, 6]
        await mock_redis.set(goods_key(5, PROJECT_ID), "stale")

        result = await service.create(PROJECT_ID, GoodsCreate(name="Widget", priority=1))

        assert result.priority == 1
        goods_repo.shift.assert_awaited_once_with(PROJECT_ID, Shift(lower=1, upper=2, delta=1))
        assert await mock_redis.exists(goods_key(5, PROJECT_ID)) == 0

    async def test_priority_past_end_is_clamped(self, service, goods_repo) -> None:
        goods_repo.count_active.return_value = 2

        result = await service.create(PROJECT_ID, GoodsCreate(name="Widget", priority=40))

        assert result.priority == 3

    async def test_created_removed_skips_ranking(self, service, goods_repo) -> None:
        result = await service.create(
            PROJECT_ID, GoodsCreate(name="Widget", priority=4, removed=True)
        )

        assert result.removed is True
        assert result.priority == 4
        goods_repo.count_active.assert_not_awaited()
        goods_repo.shift.assert_not_awaited()

    async def test_missing_project_is_a_conflict(
        self, service, goods_repo, project_repo, mock_session
    ) -> None:
        project_repo.lock.return_value = None

        with pytest.raises(ConstraintViolationError):
            await service.create(PROJECT_ID, GoodsCreate(name="Widget"))

        goods_repo.add.assert_not_called()
        mock_session.rollback.assert_awaited_once()
        mock_session.commit.assert_not_awaited()


class TestGetOne:
    async def test_reads_through_cache(self, service, goods_repo, metrics, mock_redis) -> None:
        goods_repo.get_one.return_value = make_goods(7, 1)

        first = await service.get_one(7, PROJECT_ID)
        second = await service.get_one(7, PROJECT_ID)

        assert first == second
        goods_repo.get_one.assert_awaited_once_with(7, PROJECT_ID)
        assert await mock_redis.exists(goods_key(7, PROJECT_ID)) == 1
        assert counter(metrics, "cache_misses_total", entity="good") == 1
        assert counter(metrics, "cache_hits_total", entity="good") == 1
        assert counter(metrics, "goods_reads_total") == 2

    async def test_removed_goods_still_readable(self, service, goods_repo) -> None:
        goods_repo.get_one.return_value = make_goods(7, 1, removed=True)

        result = await service.get_one(7, PROJECT_ID)

        assert result.removed is True

    async def test_not_found(self, service, metrics) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_one(7, PROJECT_ID)

        assert exc_info.value.error_key == "errors.good.NotFound"
        assert counter(metrics, "goods_reads_total") == 0

    async def test_unreadable_cache_entry_falls_back(
        self, service, goods_repo, mock_redis
    ) -> None:
        await mock_redis.set(goods_key(7, PROJECT_ID), "not json")
        goods_repo.get_one.return_value = make_goods(7, 2)

        result = await service.get_one(7, PROJECT_ID)

        assert result.priority == 2


class TestUpdate:
    async def test_patches_name_only(self, service, goods_repo, mock_redis) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 3)
        await mock_redis.set(goods_key(7, PROJECT_ID), "cached")

        result = await service.update(7, PROJECT_ID, GoodsUpdate(name="Renamed"))

        assert result.name == "Renamed"
        assert result.description == "Item 7"
        assert result.priority == 3
        goods_repo.shift.assert_not_awaited()
        assert await mock_redis.exists(goods_key(7, PROJECT_ID)) == 0

    async def test_not_found(self, service, mock_session) -> None:
        with pytest.raises(NotFoundError):
            await service.update(7, PROJECT_ID, GoodsUpdate(name="x"))
        mock_session.rollback.assert_awaited_once()


class TestRemove:
    async def test_closes_gap(self, service, goods_repo) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 2)
        goods_repo.count_active.return_value = 4

        result = await service.remove(7, PROJECT_ID)

        assert result.removed is True
        goods_repo.shift.assert_awaited_once_with(
            PROJECT_ID, Shift(lower=3, upper=4, delta=-1), exclude_id=7
        )

    async def test_already_removed_is_unchanged(self, service, goods_repo, mock_session) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 2, removed=True)

        result = await service.remove(7, PROJECT_ID)

        assert result.removed is True
        assert result.priority == 2
        goods_repo.shift.assert_not_awaited()
        mock_session.commit.assert_awaited_once()

    async def test_commit_failure_keeps_cache(
        self, service, goods_repo, mock_session, mock_redis
    ) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 2)
        goods_repo.count_active.return_value = 4
        goods_repo.shift.return_value = [8, 9]
        mock_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("gone"))
        await mock_redis.set(goods_key(8, PROJECT_ID), "cached")

        with pytest.raises(TransientStoreError):
            await service.remove(7, PROJECT_ID)

        mock_session.rollback.assert_awaited_once()
        assert await mock_redis.exists(goods_key(8, PROJECT_ID)) == 1

    async def test_missing_project_is_not_found(self, service, project_repo) -> None:
        project_repo.lock.return_value = None

        with pytest.raises(NotFoundError):
            await service.remove(7, PROJECT_ID)

    async def test_missing_goods_is_not_found(self, service) -> None:
        with pytest.raises(NotFoundError):
            await service.remove(7, PROJECT_ID)


class TestReprioritize:
    async def test_move_up(self, service, goods_repo, metrics, mock_redis) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 3)
        goods_repo.count_active.return_value = 4
        goods_repo.shift.return_value = [5, 6]
        for goods_id in (5, 6, 7):
            await mock_redis.set(goods_key(goods_id, PROJECT_ID), "cached")

        result = await service.reprioritize(7, PROJECT_ID, 1)

        assert result.priority == 1
        goods_repo.shift.assert_awaited_once_with(
            PROJECT_ID, Shift(lower=1, upper=2, delta=1), exclude_id=7
        )
        assert counter(metrics, "goods_reprioritizations_total") == 1
        for goods_id in (5, 6, 7):
            assert await mock_redis.exists(goods_key(goods_id, PROJECT_ID)) == 0

    async def test_clamps_to_last(self, service, goods_repo) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 1)
        goods_repo.count_active.return_value = 3

        result = await service.reprioritize(7, PROJECT_ID, 99)

        assert result.priority == 3
        goods_repo.shift.assert_awaited_once_with(
            PROJECT_ID, Shift(lower=2, upper=3, delta=-1), exclude_id=7
        )

    async def test_same_rank_is_noop(self, service, goods_repo, metrics, mock_session) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 2)
        goods_repo.count_active.return_value = 3

        result = await service.reprioritize(7, PROJECT_ID, 2)

        assert result.priority == 2
        goods_repo.shift.assert_not_awaited()
        mock_session.commit.assert_awaited_once()
        assert counter(metrics, "goods_reprioritizations_total") == 0

    async def test_removed_goods_not_found(self, service, goods_repo, mock_session) -> None:
        goods_repo.lock_one.return_value = make_goods(7, 2, removed=True)

        with pytest.raises(NotFoundError):
            await service.reprioritize(7, PROJECT_ID, 1)

        mock_session.rollback.assert_awaited_once()

    async def test_commit_failure_after_shift_leaves_no_trace(
        self, service, goods_repo, metrics, mock_session, mock_redis
    ) -> None:
        """A failed commit rolls the shift back and skips every after-commit effect."""
        goods_repo.lock_one.return_value = make_goods(7, 3)
        goods_repo.count_active.return_value = 4
        goods_repo.shift.return_value = [5, 6]
        mock_session.commit.side_effect = OperationalError("COMMIT", {}, Exception("gone"))
        for goods_id in (5, 6, 7):
            await mock_redis.set(goods_key(goods_id, PROJECT_ID), "cached")
        listing_before = await service.cache.listing_key(LISTING_GOODS, 10, 0)

        with pytest.raises(TransientStoreError):
            await service.reprioritize(7, PROJECT_ID, 1)

        goods_repo.shift.assert_awaited_once()
        mock_session.rollback.assert_awaited_once()
        for goods_id in (5, 6, 7):
            assert await mock_redis.exists(goods_key(goods_id, PROJECT_ID)) == 1
        assert await service.cache.listing_key(LISTING_GOODS, 10, 0) == listing_before
        assert counter(metrics, "goods_reprioritizations_total") == 0

    async def test_locks_project_before_goods(self, service, goods_repo, project_repo) -> None:
        calls: list[str] = []
        project_repo.lock.side_effect = lambda *_: calls.append("project") or Project(
            id=PROJECT_ID, name="Acme"
        )
        goods_repo.lock_one.side_effect = lambda *_: calls.append("goods") or make_goods(7, 1)
        goods_repo.count_active.return_value = 1

        await service.reprioritize(7, PROJECT_ID, 1)

        assert calls == ["project", "goods"]


class TestListAll:
    async def test_counts_and_page(self, service, goods_repo) -> None:
        goods_repo.list_active.return_value = [make_goods(1, 1), make_goods(2, 2)]
        goods_repo.count.return_value = 3
        goods_repo.count_removed.return_value = 1

        result = await service.list_all(PageParams(limit=10, offset=0))

        assert result.meta.total == 3
        assert result.meta.removed == 1
        assert result.meta.limit == 10
        assert [g.id for g in result.goods] == [1, 2]
        goods_repo.list_active.assert_awaited_once_with(10, 0)

    async def test_cached_until_a_write(self, service, goods_repo) -> None:
        page = PageParams(limit=10, offset=0)
        await service.list_all(page)
        await service.list_all(page)
        assert goods_repo.list_active.await_count == 1

        goods_repo.lock_one.return_value = make_goods(1, 1)
        goods_repo.count_active.return_value = 1
        await service.remove(1, PROJECT_ID)

        await service.list_all(page)
        assert goods_repo.list_active.await_count == 2

    async def test_listing_left_stale_when_invalidation_disabled(
        self, goods_repo, project_repo, mock_session, mock_redis
    ) -> None:
        service = GoodsService(
            goods_repo, project_repo, mock_session, Cache(ttl=60), invalidate_listings=False
        )
        page = PageParams(limit=10, offset=0)
        await service.list_all(page)

        goods_repo.lock_one.return_value = make_goods(1, 1)
        goods_repo.count_active.return_value = 1
        await service.remove(1, PROJECT_ID)

        await service.list_all(page)
        assert goods_repo.list_active.await_count == 1

    async def test_works_without_redis(
        self, goods_repo, project_repo, mock_session, mock_redis_unavailable
    ) -> None:
        service = GoodsService(goods_repo, project_repo, mock_session, Cache(ttl=60))
        page = PageParams(limit=10, offset=0)

        await service.list_all(page)
        await service.list_all(page)

        assert goods_repo.list_active.await_count == 2


def test_read_schema_from_model() -> None:
    read = GoodsRead.model_validate(make_goods(3, 2))
    assert read.project_id == PROJECT_ID

"""Tests for TaskService."""

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from task_api.core.exceptions import (
    ErrorCode,
    ErrorKind,
    NotFoundError,
    StoreError,
    ValidationError,
)
from task_api.models.task import TaskPriority, TaskStatus
from task_api.schemas.task import TaskCreate, TaskUpdate
from task_api.services.task import TaskService

from .fakes import FakeTaskCache


def count_store_reads(service: TaskService, monkeypatch: pytest.MonkeyPatch) -> list[int]:
    """Record every single-id read that reaches the repository."""
    calls: list[int] = []
    original = service.repository.get_by_id

    async def spy(task_id: int):
        calls.append(task_id)
        return await original(task_id)

    monkeypatch.setattr(service.repository, "get_by_id", spy)
    return calls


class TestCreate:
    """Tests for TaskService.create."""

    async def test_create_assigns_id_and_timestamps(self, service: TaskService) -> None:
        task = await service.create(
            TaskCreate(title="Learn Kubernetes", status=TaskStatus.TODO, priority=TaskPriority.HIGH)
        )

        assert task.id == 1
        assert task.title == "Learn Kubernetes"
        assert task.description is None
        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.HIGH
        assert task.created_at is not None
        assert task.updated_at == task.created_at

    async def test_create_accepts_mapping(self, service: TaskService) -> None:
        task = await service.create(
            {"title": "Write docs", "description": "API reference", "priority": "LOW"}
        )

        assert task.description == "API reference"
        assert task.priority == TaskPriority.LOW
        assert task.status == TaskStatus.TODO

    async def test_create_defaults(self, service: TaskService) -> None:
        task = await service.create({"title": "Defaults"})

        assert task.status == TaskStatus.TODO
        assert task.priority == TaskPriority.MEDIUM

    async def test_create_does_not_touch_cache(
        self, service: TaskService, cache: FakeTaskCache
    ) -> None:
        await service.create({"title": "No cache"})

        assert cache.gets == []
        assert cache.sets == []
        assert cache.deletes == []

    @pytest.mark.parametrize(
        "payload",
        [
            {"title": ""},
            {"title": "   "},
            {"description": "missing title"},
            {"title": "Bad status", "status": "DONE"},
            {"title": "Bad priority", "priority": "URGENT"},
        ],
    )
    async def test_create_invalid_input_raises(
        self, service: TaskService, payload: dict[str, str]
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create(payload)

        assert exc_info.value.kind == ErrorKind.VALIDATION
        assert exc_info.value.details
        assert await service.count() == 0

    async def test_validation_error_names_field(self, service: TaskService) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await service.create({"title": "x", "status": "DONE"})

        fields = [d["field"] for d in exc_info.value.details or []]
        assert fields == ["status"]

    async def test_ids_are_not_reused(self, service: TaskService) -> None:
        first = await service.create({"title": "one"})
        second = await service.create({"title": "two"})
        await service.delete(second.id)

        third = await service.create({"title": "three"})

        assert first.id == 1
        assert third.id == 3


class TestGetById:
    """Tests for the cache-aside read path."""

    async def test_create_then_get_returns_same_task(self, service: TaskService) -> None:
        created = await service.create({"title": "Round trip", "description": "d"})

        fetched = await service.get_by_id(created.id)

        assert fetched == created

    async def test_get_missing_raises_not_found(self, service: TaskService) -> None:
        with pytest.raises(NotFoundError) as exc_info:
            await service.get_by_id(999)

        assert exc_info.value.kind == ErrorKind.NOT_FOUND
        assert exc_info.value.code == ErrorCode.TASK_NOT_FOUND

    async def test_miss_populates_cache(self, service: TaskService, cache: FakeTaskCache) -> None:
        created = await service.create({"title": "Cache me"})

        await service.get_by_id(created.id)

        assert cache.gets == [created.id]
        assert cache.sets == [created.id]
        assert cache.entries[created.id] == created

    async def test_hit_skips_store(
        self,
        service: TaskService,
        cache: FakeTaskCache,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        created = await service.create({"title": "Hot task"})
        store_reads = count_store_reads(service, monkeypatch)

        first = await service.get_by_id(created.id)
        second = await service.get_by_id(created.id)

        assert first == second
        assert store_reads == [created.id]
        assert cache.sets == [created.id]

    async def test_missing_task_is_not_cached(
        self, service: TaskService, cache: FakeTaskCache
    ) -> None:
        with pytest.raises(NotFoundError):
            await service.get_by_id(42)

        assert cache.entries == {}
        assert cache.sets == []

    @pytest.mark.parametrize("task_id", [0, -1, 2**63, 2**64])
    async def test_out_of_range_id_raises_not_found(
        self,
        service: TaskService,
        cache: FakeTaskCache,
        monkeypatch: pytest.MonkeyPatch,
        task_id: int,
    ) -> None:
        store_reads = count_store_reads(service, monkeypatch)

        with pytest.raises(NotFoundError):
            await service.get_by_id(task_id)
        with pytest.raises(NotFoundError):
            await service.update(task_id, {"title": "Never stored"})
        with pytest.raises(NotFoundError):
            await service.delete(task_id)

        assert store_reads == []
        assert cache.gets == []
        assert cache.deletes == []

    async def test_cache_failure_falls_back_to_store(
        self, db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        cache = FakeTaskCache(fail=True)
        service = TaskService(db_session, cache)
        created = await service.create({"title": "Resilient"})
        store_reads = count_store_reads(service, monkeypatch)

        fetched = await service.get_by_id(created.id)
        again = await service.get_by_id(created.id)

        assert fetched == created
        assert again == created
        assert store_reads == [created.id, created.id]

    async def test_cache_disabled_always_reads_store(
        self, uncached_service: TaskService, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        created = await uncached_service.create({"title": "Uncached"})
        store_reads = count_store_reads(uncached_service, monkeypatch)

        results = [await uncached_service.get_by_id(created.id) for _ in range(3)]

        assert results == [created, created, created]
        assert store_reads == [created.id] * 3

    async def test_cache_disabled_not_found(self, uncached_service: TaskService) -> None:
        with pytest.raises(NotFoundError):
            await uncached_service.get_by_id(1)


class TestQueries:
    """Tests for collection reads and counting."""

    async def test_get_all_ordered_by_id(self, service: TaskService, cache: FakeTaskCache) -> None:
        for title in ("a", "b", "c"):
            await service.create({"title": title})

        tasks = await service.get_all()

        assert [t.title for t in tasks] == ["a", "b", "c"]
        assert cache.gets == []
        assert cache.sets == []

    async def test_get_all_empty(self, service: TaskService) -> None:
        assert await service.get_all() == []

    async def test_get_by_status(self, service: TaskService) -> None:
        await service.create({"title": "todo"})
        await service.create({"title": "doing", "status": "IN_PROGRESS"})
        await service.create({"title": "also doing", "status": "IN_PROGRESS"})

        tasks = await service.get_by_status(TaskStatus.IN_PROGRESS)

        assert [t.title for t in tasks] == ["doing", "also doing"]
        assert await service.get_by_status("CANCELLED") == []

    async def test_get_by_status_invalid(self, service: TaskService) -> None:
        with pytest.raises(ValidationError):
            await service.get_by_status("DONE")

    async def test_search_by_title_ignores_case(self, service: TaskService) -> None:
        await service.create({"title": "Learn Kubernetes"})
        await service.create({"title": "Learn Docker"})

        lower = await service.search_by_title("kubernetes")
        upper = await service.search_by_title("KUBERNETES")

        assert [t.title for t in lower] == ["Learn Kubernetes"]
        assert [t.title for t in upper] == ["Learn Kubernetes"]
        assert len(await service.search_by_title("learn")) == 2

    async def test_search_treats_wildcards_literally(self, service: TaskService) -> None:
        await service.create({"title": "100% done"})
        await service.create({"title": "1000 things"})

        tasks = await service.search_by_title("0%")

        assert [t.title for t in tasks] == ["100% done"]

    async def test_count_after_create_and_delete(self, service: TaskService) -> None:
        created = [await service.create({"title": f"task {i}"}) for i in range(3)]
        await service.delete(created[0].id)

        assert await service.count() == 2


class TestUpdate:
    """Tests for TaskService.update."""

    async def test_update_replaces_fields(self, service: TaskService) -> None:
        created = await service.create({"title": "Original", "description": "old"})

        updated = await service.update(
            created.id,
            TaskUpdate(
                title="Renamed",
                description="new",
                status=TaskStatus.IN_PROGRESS,
                priority=TaskPriority.CRITICAL,
            ),
        )

        assert updated.id == created.id
        assert updated.title == "Renamed"
        assert updated.description == "new"
        assert updated.status == TaskStatus.IN_PROGRESS
        assert updated.priority == TaskPriority.CRITICAL
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at
        assert updated.updated_at >= updated.created_at

    async def test_update_evicts_stale_cache_entry(
        self, service: TaskService, cache: FakeTaskCache
    ) -> None:
        created = await service.create({"title": "Stale"})
        await service.get_by_id(created.id)
        assert created.id in cache.entries

        await service.update(created.id, {"title": "Fresh", "status": "COMPLETED"})

        assert created.id not in cache.entries
        assert cache.deletes == [created.id]

        fetched = await service.get_by_id(created.id)
        assert fetched.title == "Fresh"
        assert fetched.status == TaskStatus.COMPLETED
        assert cache.entries[created.id] == fetched

    async def test_update_missing_raises_not_found(self, service: TaskService) -> None:
        with pytest.raises(NotFoundError):
            await service.update(999, {"title": "Ghost"})

    async def test_update_invalid_input_leaves_task_unchanged(
        self, service: TaskService, cache: FakeTaskCache
    ) -> None:
        created = await service.create({"title": "Keep me"})

        with pytest.raises(ValidationError):
            await service.update(created.id, {"title": "", "status": "TODO"})

        assert (await service.get_by_id(created.id)).title == "Keep me"
        assert cache.deletes == []

    async def test_any_status_transition_allowed(self, service: TaskService) -> None:
        created = await service.create({"title": "Reopen", "status": "COMPLETED"})

        reopened = await service.update(created.id, {"title": "Reopen", "status": "TODO"})

        assert reopened.status == TaskStatus.TODO

    async def test_update_succeeds_when_eviction_fails(
        self, db_session: AsyncSession
    ) -> None:
        service = TaskService(db_session, FakeTaskCache(fail=True))
        created = await service.create({"title": "Before"})

        updated = await service.update(created.id, {"title": "After"})

        assert updated.title == "After"
        assert (await service.get_by_id(created.id)).title == "After"


class TestDelete:
    """Tests for TaskService.delete."""

    async def test_delete_then_get_raises(
        self, service: TaskService, cache: FakeTaskCache
    ) -> None:
        created = await service.create({"title": "Doomed"})
        await service.get_by_id(created.id)

        await service.delete(created.id)

        assert created.id not in cache.entries
        with pytest.raises(NotFoundError):
            await service.get_by_id(created.id)

    async def test_delete_twice_raises_not_found(self, service: TaskService) -> None:
        created = await service.create({"title": "Once"})
        await service.delete(created.id)

        with pytest.raises(NotFoundError):
            await service.delete(created.id)

    async def test_delete_missing_raises_not_found(self, service: TaskService) -> None:
        with pytest.raises(NotFoundError):
            await service.delete(12345)

    async def test_delete_succeeds_when_eviction_fails(self, db_session: AsyncSession) -> None:
        service = TaskService(db_session, FakeTaskCache(fail=True))
        created = await service.create({"title": "Gone anyway"})

        await service.delete(created.id)

        assert await service.count() == 0


class TestStoreErrors:
    """Database failures propagate as StoreError."""

    async def test_store_failure_surfaces(
        self, service: TaskService, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        async def broken_execute(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(service.session, "execute", broken_execute)

        with pytest.raises(StoreError) as exc_info:
            await service.count()

        assert exc_info.value.kind == ErrorKind.STORE
        assert isinstance(exc_info.value.__cause__, OperationalError)


async def test_end_to_end_scenario(
    service: TaskService,
    cache: FakeTaskCache,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Create, read twice, update, read again: miss, hit, evict, repopulate."""
    created = await service.create(
        {"title": "Learn Kubernetes", "status": "TODO", "priority": "HIGH"}
    )
    assert created.id == 1
    store_reads = count_store_reads(service, monkeypatch)

    first = await service.get_by_id(1)
    second = await service.get_by_id(1)
    assert first == second == created
    assert store_reads == [1]

    await service.update(
        1, {"title": "Learn Kubernetes", "status": "IN_PROGRESS", "priority": "HIGH"}
    )
    assert 1 not in cache.entries

    third = await service.get_by_id(1)
    assert third.status == TaskStatus.IN_PROGRESS
    assert store_reads == [1, 1, 1]
    assert cache.entries[1].status == TaskStatus.IN_PROGRESS

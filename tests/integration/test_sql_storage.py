"""
集成测试：SQL 存储

在内存 SQLite（aiosqlite）上测试 SQLStorage 与 ShipService。
"""

import pytest
from datetime import datetime, timedelta, timezone

from cosmoport.errors import ShipNotFoundError
from cosmoport.models import ShipOrder, ShipType, ShipUpdateRequest
from cosmoport.services.filters import ShipFilterParams, build_specification
from cosmoport.services.ship_service import ShipService
from cosmoport.storage import PageRequest, SortDirection
from cosmoport.storage.memory import MemoryStorage

pytestmark = pytest.mark.integration

ALL_SHIPS = PageRequest(page_size=100)


async def _seed(storage, ships):
    for ship in ships:
        await storage.save(ship)


class TestSQLStorageCrud:
    """SQLStorage 增删改查测试"""

    @pytest.mark.asyncio
    async def test_save_assigns_ids(self, sql_storage, ship_factory):
        """测试插入时由数据库分配 ID"""
        first = await sql_storage.save(ship_factory(name="One"))
        second = await sql_storage.save(ship_factory(name="Two"))

        assert first.id is not None
        assert second.id == first.id + 1

        loaded = await sql_storage.find_by_id(first.id)
        assert loaded == first
        assert loaded.ship_type is ShipType.TRANSPORT
        assert loaded.prod_date == datetime(3000, 6, 1)

    @pytest.mark.asyncio
    async def test_naive_utc_dates_round_trip(self, sql_storage, create_request):
        """测试带时区的出厂日期以无时区 UTC 存储并原样读回"""
        service = ShipService(sql_storage)
        moment = datetime(3020, 1, 1, 2, 0, tzinfo=timezone(timedelta(hours=3)))

        ship = await service.create_ship(create_request(prod_date=moment))
        loaded = await sql_storage.find_by_id(ship.id)

        assert loaded.prod_date == datetime(3019, 12, 31, 23, 0)
        assert loaded.prod_date.tzinfo is None

    @pytest.mark.asyncio
    async def test_update_and_delete(self, sql_storage, ship_factory):
        """测试更新与删除"""
        ship = await sql_storage.save(ship_factory())
        ship.name = "Renamed"
        await sql_storage.save(ship)

        assert (await sql_storage.find_by_id(ship.id)).name == "Renamed"

        await sql_storage.delete(ship)
        assert await sql_storage.find_by_id(ship.id) is None

    @pytest.mark.asyncio
    async def test_service_round_trip(self, sql_storage, create_request):
        """测试 ShipService 在 SQL 存储上的完整流程"""
        service = ShipService(sql_storage)

        ship = await service.create_ship(create_request())
        updated = await service.update_ship(
            ship.id, ShipUpdateRequest(speed=0.99, prod_date=datetime(3019, 1, 1))
        )
        # 80 * 0.99 / 1 = 79.2
        assert updated.rating == 79.2
        assert await service.get_ship(ship.id) == updated

        await service.delete_ship(ship.id)
        with pytest.raises(ShipNotFoundError):
            await service.delete_ship(ship.id)


class TestSQLStorageQueries:
    """SQLStorage 过滤、分页与排序测试"""

    @pytest.mark.asyncio
    async def test_substring_is_case_sensitive(self, sql_storage, sample_fleet):
        """测试 SQLite 上的子串匹配区分大小写"""
        await _seed(sql_storage, sample_fleet)

        spec = build_specification(ShipFilterParams(name="Ex"))
        page = await sql_storage.find_all(spec, ALL_SHIPS)
        assert sorted(s.name for s in page.items) == ["Excalibur", "Explorer"]

        spec = build_specification(ShipFilterParams(name="ex"))
        page = await sql_storage.find_all(spec, ALL_SHIPS)
        assert [s.name for s in page.items] == ["exodus"]

    @pytest.mark.asyncio
    async def test_like_wildcards_are_literal(self, sql_storage, ship_factory):
        """测试名称中的 % 和 _ 按字面匹配"""
        await _seed(sql_storage, [ship_factory(name="100% Pure"), ship_factory(name="100 Pure")])

        spec = build_specification(ShipFilterParams(name="0%"))
        assert await sql_storage.count(spec) == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "params",
        [
            ShipFilterParams(),
            ShipFilterParams(planet="Earth"),
            ShipFilterParams(ship_type=ShipType.MERCHANT),
            ShipFilterParams(is_used=False),
            ShipFilterParams(is_used=True, min_rating=5.0),
            ShipFilterParams(min_speed=0.3, max_speed=0.9),
            ShipFilterParams(max_crew_size=40),
            ShipFilterParams(after=datetime(2900, 5, 5)),
            ShipFilterParams(after=datetime(2900, 1, 1), before=datetime(3015, 3, 3)),
            ShipFilterParams(min_rating=0.2, max_rating=15.84),
        ],
    )
    async def test_sql_matches_memory_scan(self, sql_storage, sample_fleet, params):
        """测试 SQL 翻译与内存求值结果一致"""
        await _seed(sql_storage, sample_fleet)
        memory = MemoryStorage(sample_fleet)
        spec = build_specification(params)

        sql_page = await sql_storage.find_all(spec, ALL_SHIPS)
        memory_page = await memory.find_all(spec, ALL_SHIPS)

        assert [s.name for s in sql_page.items] == [s.name for s in memory_page.items]
        assert await sql_storage.count(spec) == await memory.count(spec)

    @pytest.mark.asyncio
    async def test_pagination_and_ordering(self, sql_storage, sample_fleet):
        """测试分页与排序"""
        await _seed(sql_storage, sample_fleet)
        spec = build_specification(None)

        page = await sql_storage.find_all(
            spec, PageRequest(page_number=1, page_size=2, order=ShipOrder.DATE)
        )
        assert [s.name for s in page.items] == ["Excalibur", "Serenity"]
        assert page.total == 5

        page = await sql_storage.find_all(
            spec,
            PageRequest(page_size=2, order=ShipOrder.RATING, direction=SortDirection.DESC),
        )
        assert [s.name for s in page.items] == ["Nostromo", "Serenity"]

"""
Cosmoport 测试配置

包含通用的 pytest fixtures 和配置。
"""

from datetime import datetime

import pytest
import pytest_asyncio


# ============================================================================
# pytest 标记注册
# ============================================================================

def pytest_configure(config):
    """注册自定义标记"""
    config.addinivalue_line(
        "markers", "integration: 集成测试，使用真实的 SQLite 存储或 HTTP 应用"
    )
    config.addinivalue_line(
        "markers", "unit: 单元测试，不需要外部依赖"
    )


# ============================================================================
# 通用数据
# ============================================================================

def make_create_request(**overrides):
    """构造一个合法的创建请求，可覆盖任意字段"""
    from cosmoport.models import ShipCreateRequest, ShipType

    fields = {
        "name": "Explorer",
        "planet": "Mars",
        "ship_type": ShipType.TRANSPORT,
        "prod_date": datetime(3000, 6, 1),
        "is_used": False,
        "speed": 0.5,
        "crew_size": 100,
    }
    fields.update(overrides)
    return ShipCreateRequest(**fields)


def make_ship(**overrides):
    """构造一个已持久化形态的 Ship（评分按公式计算）"""
    from cosmoport.models import Ship, ShipType
    from cosmoport.services.validation import compute_rating

    fields = {
        "name": "Explorer",
        "planet": "Mars",
        "ship_type": ShipType.TRANSPORT,
        "prod_date": datetime(3000, 6, 1),
        "is_used": False,
        "speed": 0.5,
        "crew_size": 100,
    }
    fields.update(overrides)
    if "rating" not in fields:
        fields["rating"] = compute_rating(
            fields["prod_date"].year, fields["speed"], fields["is_used"]
        )
    return Ship(**fields)


def fleet():
    """一组覆盖各个过滤维度的样例飞船"""
    from cosmoport.models import ShipType

    return [
        make_ship(name="Excalibur", planet="Earth", ship_type=ShipType.MILITARY,
                  prod_date=datetime(3010, 1, 1), is_used=True, speed=0.9, crew_size=500),
        make_ship(name="Explorer", planet="Mars", ship_type=ShipType.TRANSPORT,
                  prod_date=datetime(2900, 5, 5), is_used=False, speed=0.3, crew_size=40),
        make_ship(name="Nostromo", planet="Jupiter", ship_type=ShipType.MERCHANT,
                  prod_date=datetime(3019, 12, 31), is_used=True, speed=0.65, crew_size=7),
        make_ship(name="exodus", planet="Earth", ship_type=ShipType.TRANSPORT,
                  prod_date=datetime(2800, 1, 1), is_used=False, speed=0.01, crew_size=1),
        make_ship(name="Serenity", planet="Saturn", ship_type=ShipType.MERCHANT,
                  prod_date=datetime(3015, 3, 3), is_used=False, speed=0.99, crew_size=9999),
    ]


# ============================================================================
# 通用 fixtures
# ============================================================================

@pytest.fixture
def memory_storage():
    """空的内存存储"""
    from cosmoport.storage.memory import MemoryStorage

    return MemoryStorage()


@pytest.fixture
def service(memory_storage):
    """基于内存存储的 ShipService"""
    from cosmoport.services.ship_service import ShipService

    return ShipService(memory_storage)


@pytest.fixture
def fleet_service():
    """预置样例飞船的 ShipService"""
    from cosmoport.services.ship_service import ShipService
    from cosmoport.storage.memory import MemoryStorage

    return ShipService(MemoryStorage(fleet()))


@pytest_asyncio.fixture
async def sql_storage():
    """内存 SQLite 上的 SQLStorage"""
    from cosmoport.storage.sql import SQLStorage

    storage = SQLStorage("sqlite+aiosqlite:///:memory:")
    await storage.initialize()
    yield storage
    await storage.close()


@pytest.fixture
def create_request():
    """合法创建请求的工厂"""
    return make_create_request


@pytest.fixture
def ship_factory():
    """Ship 实例工厂"""
    return make_ship


@pytest.fixture
def sample_fleet():
    """样例飞船列表（每次调用都是新实例）"""
    return fleet()

"""资产分类 API 测试"""

import pytest
from httpx import AsyncClient


class TestCreateCategory:

    @pytest.mark.asyncio
    async def test_rate_derived_from_years(self, client: AsyncClient):
        """年折旧率不填：100 / 3 = 33.33"""
        resp = await client.post(
            "/categories", json={"name": "运输工具", "useful_life_years": 3}
        )
        assert resp.status_code == 201
        data = resp.json()
        assert data["name"] == "运输工具"
        assert data["useful_life_years"] == 3
        assert data["annual_depreciation_rate"] == 33.33
        assert data["asset_count"] == 0

    @pytest.mark.asyncio
    async def test_explicit_rate_kept(self, client: AsyncClient):
        resp = await client.post(
            "/categories",
            json={"name": "电子设备", "useful_life_years": 3, "annual_depreciation_rate": 25},
        )
        assert resp.status_code == 201
        assert resp.json()["annual_depreciation_rate"] == 25.0

    @pytest.mark.asyncio
    async def test_zero_years_rejected(self, client: AsyncClient):
        resp = await client.post(
            "/categories", json={"name": "无效", "useful_life_years": 0}
        )
        assert resp.status_code == 422

    @pytest.mark.asyncio
    async def test_rate_over_100_rejected(self, client: AsyncClient):
        resp = await client.post(
            "/categories",
            json={"name": "无效", "useful_life_years": 5, "annual_depreciation_rate": 120},
        )
        assert resp.status_code == 422


class TestQueryCategory:

    @pytest.mark.asyncio
    async def test_list_includes_asset_count(self, client: AsyncClient, sample_asset):
        resp = await client.get("/categories")
        assert resp.status_code == 200
        items = resp.json()
        assert len(items) == 1
        assert items[0]["name"] == "办公设备"
        assert items[0]["asset_count"] == 1

    @pytest.mark.asyncio
    async def test_get_missing(self, client: AsyncClient):
        resp = await client.get("/categories/not-exist")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_defaults(self, client: AsyncClient, equipment_category):
        """5 年 → 60 个月，20%"""
        resp = await client.get(f"/categories/{equipment_category.id}/defaults")
        assert resp.status_code == 200
        data = resp.json()
        assert data["useful_life_months"] == 60
        assert data["depreciation_rate"] == 20.0


class TestUpdateCategory:

    @pytest.mark.asyncio
    async def test_update_unused_category(self, client: AsyncClient, equipment_category):
        """未被引用：可改年限，未指定年折旧率时重新推导"""
        resp = await client.put(
            f"/categories/{equipment_category.id}", json={"useful_life_years": 4}
        )
        assert resp.status_code == 200
        data = resp.json()
        assert data["useful_life_years"] == 4
        assert data["annual_depreciation_rate"] == 25.0

    @pytest.mark.asyncio
    async def test_parameters_locked_when_in_use(self, client: AsyncClient, sample_asset):
        resp = await client.put(
            f"/categories/{sample_asset.category_id}",
            json={"annual_depreciation_rate": 10},
        )
        assert resp.status_code == 409

        # 已有资产的参数保持不变
        resp = await client.get(f"/assets/{sample_asset.id}")
        assert resp.json()["depreciation_rate"] == 20.0

    @pytest.mark.asyncio
    async def test_rename_allowed_when_in_use(self, client: AsyncClient, sample_asset):
        resp = await client.put(
            f"/categories/{sample_asset.category_id}", json={"name": "IT 设备"}
        )
        assert resp.status_code == 200
        assert resp.json()["name"] == "IT 设备"

        resp = await client.get(f"/assets/{sample_asset.id}")
        assert resp.json()["category_name"] == "IT 设备"


class TestDeleteCategory:

    @pytest.mark.asyncio
    async def test_delete_unused(self, client: AsyncClient, equipment_category):
        resp = await client.delete(f"/categories/{equipment_category.id}")
        assert resp.status_code == 200

        resp = await client.get(f"/categories/{equipment_category.id}")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_in_use_rejected(self, client: AsyncClient, sample_asset):
        resp = await client.delete(f"/categories/{sample_asset.category_id}")
        assert resp.status_code == 409
        assert "仍有资产引用" in resp.json()["detail"]

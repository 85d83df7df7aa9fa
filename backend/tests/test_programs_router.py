"""
프로그램 라우터 테스트
"""
import pytest
from uuid import uuid4

from app.routers.programs import resolve_data_sources, source_distribution


class TestDataSourceHelpers:
    """데이터 출처 필터/분포 헬퍼"""

    def test_kocca_alias_expands(self):
        assert resolve_data_sources("한국콘텐츠진흥원") == ["KOCCA-PIMS", "KOCCA-Finance"]

    def test_plain_source(self):
        assert resolve_data_sources("K-Startup") == ["K-Startup"]
        assert resolve_data_sources(None) == []

    def test_distribution_merges_kocca(self, make_program):
        programs = [
            make_program(data_source="KOCCA-PIMS"),
            make_program(data_source="KOCCA-Finance"),
            make_program(data_source="기업마당"),
        ]

        assert source_distribution(programs) == {"한국콘텐츠진흥원": 2, "기업마당": 1}


class TestProgramEndpoints:
    """프로그램 엔드포인트"""

    @pytest.mark.asyncio
    async def test_create_program(self, client, sample_program_data):
        response = await client.post("/api/v1/programs", json=sample_program_data)

        assert response.status_code == 201
        data = response.json()
        assert data["title"] == "중소기업 정책자금 지원"
        assert data["sync_status"] == "active"
        assert data["target_audience"] == ["전체"]

    @pytest.mark.asyncio
    async def test_create_duplicate_program(self, client, sample_program_data):
        await client.post("/api/v1/programs", json=sample_program_data)
        response = await client.post("/api/v1/programs", json=sample_program_data)

        assert response.status_code == 409

    @pytest.mark.asyncio
    async def test_list_ordered_by_registered_at(self, client, make_program):
        newest = make_program(title="최신")
        make_program(title="이전")

        response = await client.get("/api/v1/programs")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["page_size"] == 20
        assert data["items"][0]["id"] == str(newest.id)

    @pytest.mark.asyncio
    async def test_list_page_size_limit(self, client):
        response = await client.get("/api/v1/programs", params={"page_size": 101})
        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_filter_by_kocca_alias(self, client, make_program):
        make_program(data_source="KOCCA-PIMS")
        make_program(data_source="KOCCA-Finance")
        make_program(data_source="K-Startup")

        response = await client.get("/api/v1/programs", params={"data_source": "한국콘텐츠진흥원"})

        data = response.json()
        assert data["total"] == 2
        assert data["source_distribution"] == {"한국콘텐츠진흥원": 2}

    @pytest.mark.asyncio
    async def test_filter_by_list_membership(self, client, make_program):
        make_program(title="부산 사업", target_location=["부산"], keywords=["수출"])
        make_program(title="서울 사업", target_location=["서울"], keywords=["채용"])

        by_location = (await client.get("/api/v1/programs", params={"target_location": "부산"})).json()
        by_keyword = (await client.get("/api/v1/programs", params={"keyword": "채용"})).json()
        by_title = (await client.get("/api/v1/programs", params={"keyword": "부산"})).json()

        assert [p["title"] for p in by_location["items"]] == ["부산 사업"]
        assert [p["title"] for p in by_keyword["items"]] == ["서울 사업"]
        assert [p["title"] for p in by_title["items"]] == ["부산 사업"]

    @pytest.mark.asyncio
    async def test_filter_values_are_literal(self, client, make_program):
        make_program(title="일반 사업", target_audience=["제조"], keywords=["수출"])
        make_program(title="창업 사업", target_audience=["IT"], keywords=["R&D"])

        for params in (
            {"keyword": "%"},
            {"keyword": "_"},
            {"target_audience": "%"},
            {"target_location": "_"},
        ):
            response = await client.get("/api/v1/programs", params=params)
            assert response.json()["total"] == 0, params

        make_program(title="100% 지원", target_audience=["IT_서비스"], keywords=["보조금"])
        by_title = (await client.get("/api/v1/programs", params={"keyword": "100%"})).json()
        by_audience = (await client.get("/api/v1/programs", params={"target_audience": "IT_서비스"})).json()
        partial = (await client.get("/api/v1/programs", params={"target_audience": "서비스"})).json()

        assert [p["title"] for p in by_title["items"]] == ["100% 지원"]
        assert [p["title"] for p in by_audience["items"]] == ["100% 지원"]
        assert partial["total"] == 0

    @pytest.mark.asyncio
    async def test_get_missing_program(self, client):
        response = await client.get(f"/api/v1/programs/{uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_archive_program(self, client, make_program):
        program = make_program()

        response = await client.patch(
            f"/api/v1/programs/{program.id}", json={"sync_status": "archived"}
        )

        assert response.status_code == 200
        assert response.json()["sync_status"] == "archived"

        active = (await client.get("/api/v1/programs", params={"sync_status": "active"})).json()
        assert active["total"] == 0

    @pytest.mark.asyncio
    async def test_delete_program(self, client, make_program):
        program = make_program()

        response = await client.delete(f"/api/v1/programs/{program.id}")
        assert response.status_code == 204

        response = await client.get(f"/api/v1/programs/{program.id}")
        assert response.status_code == 404

"""
고객 일괄 등록 테스트
CSV/Excel 파싱, 행 단위 검증, 중복 처리
"""
import io

import pandas as pd
import pytest

from app.models import Customer
from app.services.customer_import_service import (
    CustomerImportService,
    ImportFileError,
    TEMPLATE_COLUMNS,
    build_template,
    decode_csv,
    parse_file,
)

CSV_HEADER = "business_number,business_type,name,industry,location,keywords,contact_email\n"


def _csv(*rows: str) -> bytes:
    return (CSV_HEADER + "\n".join(rows) + "\n").encode("utf-8")


class TestParsing:

    def test_decode_utf8_with_bom(self):
        assert decode_csv("\ufeffname\n가나다".encode("utf-8")) == "name\n가나다"

    def test_decode_cp949(self):
        assert decode_csv("상호명\n오너십".encode("cp949")) == "상호명\n오너십"

    def test_unsupported_extension(self):
        with pytest.raises(ImportFileError):
            parse_file("customers.txt", b"whatever")

    def test_parse_csv(self):
        rows = parse_file(
            "customers.csv",
            _csv('1234567890,INDIVIDUAL,오너십,IT,서울,"funding, hiring",'),
        )

        assert rows[0]["business_number"] == "1234567890"
        assert rows[0]["keywords"] == "funding, hiring"

    def test_parse_excel_keeps_leading_zeros(self):
        buffer = io.BytesIO()
        pd.DataFrame([{
            "business_number": "0123456789",
            "business_type": "CORPORATE",
            "name": "엑셀 고객",
            "industry": "제조",
            "location": "부산",
            "keywords": "수출",
            "notes": None,
        }]).to_excel(buffer, index=False)

        rows = parse_file("customers.xlsx", buffer.getvalue())

        assert rows[0]["business_number"] == "0123456789"
        assert rows[0]["notes"] is None


class TestCustomerImportService:

    def test_imports_valid_rows(self, db_session):
        result = CustomerImportService(db_session).import_file(
            "customers.csv",
            _csv(
                '1234567890,INDIVIDUAL,오너십,IT,서울,"funding, hiring",ceo@ownership.co.kr',
                "2234567890,CORPORATE,컨설팅랩,서비스,부산,수출,",
            ),
        )

        assert result.imported_count == 2
        assert result.failed_count == 0
        customer = db_session.query(Customer).filter_by(business_number="1234567890").one()
        assert customer.keywords == ["funding", "hiring"]
        assert customer.contact_email == "ceo@ownership.co.kr"

    def test_reports_invalid_rows(self, db_session):
        result = CustomerImportService(db_session).import_file(
            "customers.csv",
            _csv(
                "12345,INDIVIDUAL,잘못된번호,IT,서울,funding,",
                "3234567890,INDIVIDUAL,키워드없음,IT,서울,,",
                "4234567890,INDIVIDUAL,정상,IT,서울,funding,",
            ),
        )

        assert result.imported_count == 1
        assert result.failed_count == 2
        assert [(e.row, e.field) for e in result.errors] == [
            (1, "business_number"),
            (2, "keywords"),
        ]

    def test_duplicates_in_file_and_database(self, db_session, make_customer):
        make_customer(business_number="5234567890")

        result = CustomerImportService(db_session).import_file(
            "customers.csv",
            _csv(
                "5234567890,INDIVIDUAL,기존 고객,IT,서울,funding,",
                "6234567890,INDIVIDUAL,첫번째,IT,서울,funding,",
                "6234567890,INDIVIDUAL,두번째,IT,서울,funding,",
            ),
        )

        assert result.imported_count == 1
        assert result.failed_count == 2
        assert {e.row for e in result.errors} == {1, 3}
        assert db_session.query(Customer).count() == 2

    def test_skips_blank_rows(self, db_session):
        result = CustomerImportService(db_session).import_file(
            "customers.csv",
            _csv(",,,,,,", "7234567890,INDIVIDUAL,정상,IT,서울,funding,"),
        )

        assert result.imported_count == 1
        assert result.failed_count == 0

    def test_empty_file(self, db_session):
        with pytest.raises(ImportFileError):
            CustomerImportService(db_session).import_file("customers.csv", CSV_HEADER.encode())

    def test_korean_headers(self, db_session):
        content = (
            "사업자등록번호*,사업자유형*,상호명,업종,소재지,선호키워드*\n"
            "필수 (10자리 숫자),필수 (INDIVIDUAL 또는 CORPORATE),필수,필수,필수,필수 (쉼표로 구분)\n"
            "9234567890,CORPORATE,한글 헤더,제조,부산,\"수출, 인증\"\n"
        ).encode("cp949")

        result = CustomerImportService(db_session).import_file("customers.csv", content)

        assert result.imported_count == 1
        assert result.failed_count == 0
        customer = db_session.query(Customer).one()
        assert customer.name == "한글 헤더"
        assert customer.keywords == ["수출", "인증"]


class TestTemplate:

    def test_template_layout(self):
        df = pd.read_excel(io.BytesIO(build_template()), dtype=str)

        assert list(df.columns) == [header for _, header, _, _ in TEMPLATE_COLUMNS]
        assert df.iloc[0, 0].startswith("필수")
        assert df.iloc[1, 0] == "1234567890"

    def test_unmodified_template_imports_samples(self, db_session):
        result = CustomerImportService(db_session).import_file("template.xlsx", build_template())

        assert result.imported_count == 2
        assert result.failed_count == 0
        corporate = db_session.query(Customer).filter_by(business_type="CORPORATE").one()
        assert corporate.corporate_number == "1234567890123"
        assert corporate.budget == 100000000
        assert corporate.keywords == ["스마트팩토리", "IoT", "수출"]


class TestBulkEndpoint:

    @pytest.mark.asyncio
    async def test_bulk_upload(self, client):
        response = await client.post(
            "/api/v1/customers/bulk",
            files={"file": ("customers.csv", _csv("8234567890,INDIVIDUAL,업로드,IT,서울,funding,"), "text/csv")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["imported_count"] == 1
        assert data["failed_count"] == 0
        assert data["errors"] == []

    @pytest.mark.asyncio
    async def test_bulk_upload_bad_extension(self, client):
        response = await client.post(
            "/api/v1/customers/bulk",
            files={"file": ("customers.pdf", b"%PDF", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["error"]["category"] == "validation"

    @pytest.mark.asyncio
    async def test_download_template(self, client):
        response = await client.get("/api/v1/customers/bulk/template")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith(
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
        )
        assert "customer_bulk_upload_template_" in response.headers["content-disposition"]

        upload = await client.post(
            "/api/v1/customers/bulk",
            files={"file": ("template.xlsx", response.content, "application/octet-stream")},
        )
        assert upload.json()["imported_count"] == 2

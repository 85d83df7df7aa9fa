# -*- coding: utf-8 -*-
"""
고객 일괄 등록 서비스

지원 파일 형식:
- CSV (.csv): UTF-8 (BOM 허용), 실패 시 CP949
- Excel (.xlsx, .xls)

첫 번째 행은 컬럼 헤더 (필드명 또는 템플릿의 한글 헤더), keywords 컬럼은 쉼표로 구분
템플릿의 안내 행("필수 ...")은 건너뜀
"""
import csv
import io
import logging
from typing import Any, Dict, List, Optional

import pandas as pd
from openpyxl.utils import get_column_letter
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.models.core import Customer
from app.repositories.customer_repository import CustomerRepository
from app.schemas.customer import BulkImportResponse, BulkImportRowError, CustomerCreate

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ("csv", "xlsx", "xls")

# (필드, 템플릿 헤더, 안내, 컬럼 너비)
TEMPLATE_COLUMNS = [
    ("business_number", "사업자등록번호*", "필수 (10자리 숫자)", 18),
    ("business_type", "사업자유형*", "필수 (INDIVIDUAL 또는 CORPORATE)", 18),
    ("corporate_number", "법인등록번호", "법인사업자만 (13자리 숫자)", 18),
    ("name", "사업자명/상호*", "필수", 20),
    ("industry", "업종*", "필수", 15),
    ("company_size", "기업규모", "선택", 12),
    ("location", "지역*", "필수", 10),
    ("budget", "예산", "선택 (숫자만)", 12),
    ("keywords", "선호키워드*", "필수 (쉼표로 구분)", 30),
    ("contact_email", "이메일", "선택", 25),
    ("contact_phone", "전화번호", "선택", 15),
    ("notes", "메모", "선택", 30),
]
TEMPLATE_SAMPLES = [
    [
        "1234567890", "INDIVIDUAL", None, "테크스타트업", "IT/소프트웨어", "10-50명", "서울",
        "50000000", "AI,스타트업,기술개발", "contact@techstartup.co.kr", "02-1234-5678",
        "AI 기반 솔루션 개발 중",
    ],
    [
        "9876543210", "CORPORATE", "1234567890123", "글로벌이노베이션(주)", "제조업", "50-100명",
        "경기", "100000000", "스마트팩토리,IoT,수출", "info@global-innovation.co.kr",
        "031-9876-5432", "스마트팩토리 구축 희망",
    ],
]
TEMPLATE_SHEET = "고객 정보"
INSTRUCTION_PREFIX = "필수"

# 템플릿 한글 헤더 → 필드명 (필수 표시 * 제외)
HEADER_ALIASES = {header.rstrip("*"): field for field, header, _, _ in TEMPLATE_COLUMNS}
HEADER_ALIASES.update({"상호명": "name", "소재지": "location", "키워드": "keywords"})


class ImportFileError(ValueError):
    """파일 형식 오류 또는 파싱 실패"""
    pass


def file_extension(filename: str) -> str:
    return filename.lower().rsplit(".", 1)[-1] if "." in filename else ""


def decode_csv(content: bytes) -> str:
    """CSV 인코딩 감지 (UTF-8 → CP949)"""
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError:
        try:
            return content.decode("cp949")  # 한글 Windows
        except UnicodeDecodeError as e:
            raise ImportFileError("CSV 인코딩을 인식할 수 없습니다 (UTF-8 또는 CP949)") from e


def parse_csv_content(content: str) -> List[Dict[str, Any]]:
    """CSV 문자열을 파싱하여 딕셔너리 리스트로 변환"""
    reader = csv.DictReader(io.StringIO(content))
    return list(reader)


def parse_excel_content(content: bytes) -> List[Dict[str, Any]]:
    """Excel 파일을 파싱하여 딕셔너리 리스트로 변환 (사업자번호 앞자리 0 보존을 위해 문자열로 읽음)"""
    df = pd.read_excel(io.BytesIO(content), dtype=str)
    # NaN 값을 None으로 변환
    df = df.astype(object).where(pd.notnull(df), None)
    return df.to_dict("records")


def parse_file(filename: str, content: bytes) -> List[Dict[str, Any]]:
    """파일 확장자에 따라 행 목록으로 변환"""
    ext = file_extension(filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise ImportFileError(
            f"지원하지 않는 파일 형식입니다. CSV 또는 Excel 파일만 지원합니다. (받은 형식: {ext})"
        )

    try:
        if ext == "csv":
            return parse_csv_content(decode_csv(content))
        return parse_excel_content(content)
    except ImportFileError:
        raise
    except Exception as e:
        raise ImportFileError(f"파일 파싱 실패: {e}") from e


def _normalize_row(row: Dict[str, Any]) -> Dict[str, Any]:
    """헤더 공백 제거 및 한글 헤더를 필드명으로 변환, 빈 셀은 None"""
    normalized = {}
    for key, value in row.items():
        if key is None:
            continue
        if isinstance(value, str):
            value = value.strip() or None
        header = str(key).strip().rstrip("*").strip()
        normalized[HEADER_ALIASES.get(header, header)] = value
    return normalized


def _is_instruction_row(row: Dict[str, Any]) -> bool:
    value = row.get("business_number")
    return isinstance(value, str) and value.startswith(INSTRUCTION_PREFIX)


def build_template() -> bytes:
    """일괄 등록용 Excel 템플릿 (헤더, 안내 행, 샘플 2건)"""
    headers = [header for _, header, _, _ in TEMPLATE_COLUMNS]
    instructions = [instruction for _, _, instruction, _ in TEMPLATE_COLUMNS]
    df = pd.DataFrame([instructions] + TEMPLATE_SAMPLES, columns=headers)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=TEMPLATE_SHEET)
        sheet = writer.sheets[TEMPLATE_SHEET]
        for index, (_, _, _, width) in enumerate(TEMPLATE_COLUMNS, start=1):
            sheet.column_dimensions[get_column_letter(index)].width = width
    return buffer.getvalue()


class CustomerImportService:
    """
    고객 일괄 등록

    행 단위 검증(CustomerCreate) 후 유효한 행만 저장.
    파일 내 중복 및 기존 고객과 중복된 사업자등록번호는 오류로 보고하고 건너뜀
    """

    def __init__(self, db: Session, customers: Optional[CustomerRepository] = None):
        self.db = db
        self.customers = customers or CustomerRepository(db)

    def import_rows(self, rows: List[Dict[str, Any]]) -> BulkImportResponse:
        errors: List[BulkImportRowError] = []
        valid: List[tuple] = []

        for row_number, raw in enumerate(rows, start=1):
            row = _normalize_row(raw)
            # 빈 행, 템플릿 안내 행 스킵
            if not any(value is not None for value in row.values()) or _is_instruction_row(row):
                continue

            try:
                valid.append((row_number, CustomerCreate(**row)))
            except ValidationError as e:
                for error in e.errors():
                    field = ".".join(str(part) for part in error["loc"]) or None
                    errors.append(BulkImportRowError(row=row_number, field=field, message=error["msg"]))

        existing = self.customers.existing_business_numbers(
            data.business_number for _, data in valid
        )
        seen = set()
        to_insert: List[Customer] = []

        for row_number, data in valid:
            if data.business_number in existing:
                errors.append(BulkImportRowError(
                    row=row_number,
                    field="business_number",
                    message=f"이미 등록된 사업자등록번호입니다: {data.business_number}",
                ))
                continue
            if data.business_number in seen:
                errors.append(BulkImportRowError(
                    row=row_number,
                    field="business_number",
                    message=f"파일 내 중복된 사업자등록번호입니다: {data.business_number}",
                ))
                continue

            seen.add(data.business_number)
            to_insert.append(Customer(**data.model_dump()))

        if to_insert:
            self.db.add_all(to_insert)
            self.db.commit()

        failed_rows = {error.row for error in errors}
        logger.info(
            f"Customer bulk import: imported={len(to_insert)}, failed={len(failed_rows)}"
        )

        return BulkImportResponse(
            imported_count=len(to_insert),
            failed_count=len(failed_rows),
            errors=sorted(errors, key=lambda error: error.row),
        )

    def import_file(self, filename: str, content: bytes) -> BulkImportResponse:
        rows = parse_file(filename, content)
        if not rows:
            raise ImportFileError("파일에 데이터가 없습니다")
        return self.import_rows(rows)

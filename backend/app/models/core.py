"""
Core Schema ORM Models
고객, 정부지원사업 프로그램, 매칭 결과, 관심 프로그램(watchlist), 진행사업
"""
from datetime import datetime
from uuid import uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from app.database import Base


class Customer(Base):
    """고객 (컨설팅 대상 사업자)

    industry/location은 매칭의 핵심 속성이며, 비어 있으면 해당 항목은 매칭되지 않음
    """

    __tablename__ = "customers"
    __table_args__ = (
        CheckConstraint(
            "business_type IN ('INDIVIDUAL', 'CORPORATE')",
            name="ck_customers_business_type"
        ),
        UniqueConstraint("business_number", name="uq_customers_business_number"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    business_number = Column(String(10), nullable=False)  # 사업자등록번호 (10자리)
    business_type = Column(String(20), nullable=False)
    corporate_number = Column(String(13), nullable=True)  # 법인등록번호 (13자리)
    name = Column(String(255), nullable=False)

    # 기업 정보
    industry = Column(String(100), nullable=True)
    company_size = Column(String(50), nullable=True)
    location = Column(String(100), nullable=True)
    budget = Column(Integer, nullable=True)
    keywords = Column(JSON, default=list, nullable=False)  # 관심 키워드 (순서 유지)

    # 연락처
    contact_email = Column(String(255), nullable=True)
    contact_phone = Column(String(50), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    matching_results = relationship(
        "MatchingResult", back_populates="customer", cascade="all, delete-orphan"
    )
    watchlist = relationship(
        "CustomerProgram", back_populates="customer", cascade="all, delete-orphan"
    )
    projects = relationship(
        "CustomerProject", back_populates="customer", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}')>"


class Program(Base):
    """정부지원사업 프로그램

    target_audience의 "전체", target_location의 "전국"은 모든 값과 일치하는 센티널
    sync_status == "active"인 프로그램만 매칭 대상
    """

    __tablename__ = "programs"
    __table_args__ = (
        UniqueConstraint("data_source", "source_api_id", name="uq_programs_source_api_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    data_source = Column(String(100), nullable=False)  # 기업마당, K-Startup, KOCCA-PIMS ...
    source_api_id = Column(String(255), nullable=False)
    title = Column(String(500), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(100), nullable=True)

    # 매칭 속성
    target_audience = Column(JSON, default=list, nullable=False)
    target_location = Column(JSON, default=list, nullable=False)
    keywords = Column(JSON, default=list, nullable=False)

    budget_range = Column(String(255), nullable=True)
    deadline = Column(DateTime, nullable=True)
    source_url = Column(String(1000), nullable=True)
    attachment_url = Column(String(1000), nullable=True)
    raw_data = Column(JSON, nullable=True)

    registered_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    start_date = Column(DateTime, nullable=True)
    end_date = Column(DateTime, nullable=True)
    last_synced_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    sync_status = Column(String(20), default="active", nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    matching_results = relationship(
        "MatchingResult", back_populates="program", cascade="all, delete-orphan"
    )
    watchers = relationship(
        "CustomerProgram", back_populates="program", cascade="all, delete-orphan"
    )
    projects = relationship(
        "CustomerProject", back_populates="program", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Program(id={self.id}, title='{self.title}')>"


class MatchingResult(Base):
    """고객-프로그램 매칭 결과

    (customer_id, program_id) 복합 유니크 키 기준으로 upsert
    """

    __tablename__ = "matching_results"
    __table_args__ = (
        CheckConstraint("score >= 0 AND score <= 100", name="ck_matching_results_score"),
        UniqueConstraint("customer_id", "program_id", name="uq_matching_results_customer_program"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    program_id = Column(Uuid, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False, index=True)
    score = Column(Integer, nullable=False)  # 0-100
    matched_industry = Column(Boolean, default=False, nullable=False)
    matched_location = Column(Boolean, default=False, nullable=False)
    matched_keywords = Column(JSON, default=list, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="matching_results")
    program = relationship("Program", back_populates="matching_results")

    def __repr__(self):
        return (
            f"<MatchingResult(customer_id={self.customer_id}, "
            f"program_id={self.program_id}, score={self.score})>"
        )


class CustomerProgram(Base):
    """고객 관심 프로그램 (watchlist)"""

    __tablename__ = "customer_programs"
    __table_args__ = (
        UniqueConstraint("customer_id", "program_id", name="uq_customer_programs_customer_program"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    program_id = Column(Uuid, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False)
    notes = Column(Text, nullable=True)
    added_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="watchlist")
    program = relationship("Program", back_populates="watchers")

    def __repr__(self):
        return f"<CustomerProgram(customer_id={self.customer_id}, program_id={self.program_id})>"


# 진행사업 상태 (서류준비 → 신청완료 → 심사중 → 선정/탈락 → 완료, 취소/보류)
PROJECT_STATUSES = (
    "preparing",
    "submitted",
    "reviewing",
    "selected",
    "rejected",
    "cancelled",
    "completed",
)


class CustomerProject(Base):
    """고객 진행사업 (실제로 신청을 진행하기로 한 프로그램)"""

    __tablename__ = "customer_projects"
    __table_args__ = (
        CheckConstraint(
            "status IN (" + ", ".join(f"'{status}'" for status in PROJECT_STATUSES) + ")",
            name="ck_customer_projects_status"
        ),
        UniqueConstraint("customer_id", "program_id", name="uq_customer_projects_customer_program"),
    )

    id = Column(Uuid, primary_key=True, default=uuid4)
    customer_id = Column(Uuid, ForeignKey("customers.id", ondelete="CASCADE"), nullable=False, index=True)
    program_id = Column(Uuid, ForeignKey("programs.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), default="preparing", nullable=False)
    notes = Column(Text, nullable=True)

    started_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    submitted_at = Column(DateTime, nullable=True)  # 신청일
    result_at = Column(DateTime, nullable=True)  # 결과 발표일
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    customer = relationship("Customer", back_populates="projects")
    program = relationship("Program", back_populates="projects")

    def __repr__(self):
        return f"<CustomerProject(customer_id={self.customer_id}, status='{self.status}')>"

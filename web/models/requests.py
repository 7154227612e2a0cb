"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
분개 필드는 타입을 강제하지 않고 원본 값을 그대로 받아 build_entry_draft에서 검증한다
(위반 조건을 한 번에 모아 보고하기 위함).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# snake_case / camelCase 둘 다 허용
_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class JournalLineRequest(BaseModel):
    """분개 항목 요청

    필드 이름(camelCase → snake_case)만 정규화한다.
    """

    model_config = _CAMEL_CONFIG

    account_id: Any = Field(default=None, description="계정 ID")
    account_code: Any = Field(default=None, description="계정 코드 (예: 1010)")
    debit: Any = Field(default=None, description="차변 금액")
    credit: Any = Field(default=None, description="대변 금액")
    description: Any = Field(default=None, description="항목 설명")


class JournalEntryCreateRequest(BaseModel):
    """분개 생성 요청"""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "entry_date": "2024-01-01",
                    "description": "Rent",
                    "lines": [
                        {"account_code": "1010", "debit": "0", "credit": "1500"},
                        {"account_code": "6100", "debit": "1500", "credit": "0"},
                    ],
                }
            ]
        },
    )

    entry_date: Any = Field(default=None, description="분개 일자 (YYYY-MM-DD)")
    description: Any = Field(default=None, description="적요")
    reference_number: Any = Field(default=None, description="외부 참조 번호")
    created_by: Any = Field(default=None, description="작성자")
    lines: Any = Field(default=None, description="분개 항목 (JournalLineRequest 목록)")

    @field_validator("lines")
    @classmethod
    def normalize_lines(cls, value: Any) -> Any:
        """객체인 항목만 필드 이름 정규화 (나머지는 build_entry_draft가 보고)"""
        if not isinstance(value, list):
            return value
        return [
            JournalLineRequest.model_validate(item).model_dump() if isinstance(item, dict) else item
            for item in value
        ]


class AccountCreateRequest(BaseModel):
    """계정 추가 요청"""

    model_config = _CAMEL_CONFIG

    code: str = Field(..., description="계정 코드")
    name: str = Field(..., description="계정 이름")
    category: str = Field(..., description="계정 분류 (assets/liabilities/equity/revenue/expenses)")
    subcategory: str | None = Field(default=None, description="세부 분류")
    description: str | None = Field(default=None, description="설명")

from datetime import datetime
from typing import Optional, List, Dict, Any

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel

from app.core.query.executor import QueryResult
from app.core.query.gateway import QueryCommand, build_command


# =========================
# QUERY GATEWAY
# =========================
class QueryRequest(BaseModel):
    # Raw SQL (only SELECT allowed)
    sql: Optional[str] = Field(default=None, max_length=10000)
    # Natural language question (requires OPENAI_API_KEY)
    question: Optional[str] = Field(default=None, max_length=2000)
    # Page size and row offset
    limit: Optional[int] = Field(default=None, ge=1, le=1000)
    offset: Optional[int] = Field(default=None, ge=0)

    def to_command(self) -> QueryCommand:
        return build_command(self.sql, self.question, self.limit, self.offset)


class QueryResponse(BaseModel):
    rows: List[Dict[str, Any]]
    columns: Optional[List[str]] = None
    truncated: Optional[bool] = None
    row_count: int = Field(alias="rowCount")
    sql: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)

    # Absent optionals are omitted; NULLs inside rows are kept
    @model_serializer(mode="wrap")
    def _omit_empty_fields(self, handler):
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}

    @classmethod
    def from_result(cls, result: QueryResult) -> "QueryResponse":
        return cls(
            rows=result.rows,
            columns=result.columns,
            truncated=True if result.truncated else None,
            row_count=result.row_count,
            sql=result.sql,
        )


# =========================
# REPORT
# =========================
class ReportBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    question: str = Field(min_length=1)
    chart_type: Optional[str] = Field(default=None, max_length=50)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportCreate(ReportBase):
    pass


class ReportUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    question: Optional[str] = Field(default=None, min_length=1)
    chart_type: Optional[str] = Field(default=None, max_length=50)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ReportResponse(ReportBase):
    id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, from_attributes=True
    )

"""여러 라우터가 공유하는 응답 스키마입니다."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    # 프론트엔드 계약에 맞춰 camelCase 키로 직렬화한다.
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MessageOut(BaseModel):
    message: str

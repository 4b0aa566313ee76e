"""서비스 레이어 패키지 초기화 모듈입니다."""

from app.services import (
    auth_service,
    batch_service,
    enrollment_service,
    report_service,
    insights_service,
    stats_service,
    export_service,
    bootstrap_service,
)

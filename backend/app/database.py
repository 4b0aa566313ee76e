"""SQLAlchemy 엔진/세션 팩토리를 묶은 저장소 핸들과 요청 단위 세션 의존성입니다."""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

Base = declarative_base()


class Database:
    """프로세스 수명 동안 하나만 생성되어 app.state에 주입되는 저장소 핸들."""

    def __init__(self, url: str, max_workers: int = 4, echo: bool = False):
        self.url = url
        self.max_workers = max(1, max_workers)
        connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
        self.engine = create_engine(url, connect_args=connect_args, echo=echo)
        if url.startswith("sqlite"):
            event.listen(self.engine, "connect", _enable_sqlite_foreign_keys)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def drop_all(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def gather(self, queries: Dict[str, Callable[[Session], Any]]) -> Dict[str, Any]:
        """서로 독립적인 읽기 쿼리를 쿼리별 세션으로 동시에 실행하고 결과를 키별로 모읍니다.

        하나라도 실패하면 예외가 그대로 전파됩니다.
        """
        def run(query: Callable[[Session], Any]) -> Any:
            db = self.SessionLocal()
            try:
                return query(db)
            finally:
                db.close()

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(queries) or 1)) as pool:
            futures = {key: pool.submit(run, query) for key, query in queries.items()}
            return {key: future.result() for key, future in futures.items()}

    def dispose(self) -> None:
        self.engine.dispose()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def get_database(request: Request) -> Database:
    return request.app.state.database


def get_db(request: Request) -> Iterator[Session]:
    yield from get_database(request).session()

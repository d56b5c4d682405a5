import logging
from typing import Optional

from pymongo import MongoClient
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from config.settings import settings               # ✅ 환경변수 설정 파일 불러오기
from models.grades import GRADE_INDEXES

logger = logging.getLogger(__name__)

# ✅ 프로세스 전역 MongoClient (스레드 안전, 커넥션 풀 내장) - 최초 사용 시 생성
_client: Optional[MongoClient] = None


def get_client() -> MongoClient:
    global _client
    if _client is None:
        _client = MongoClient(
            settings.MONGO_URI,
            serverSelectionTimeoutMS=settings.MONGO_SERVER_SELECTION_TIMEOUT_MS,
            socketTimeoutMS=settings.MONGO_SOCKET_TIMEOUT_MS,
        )
    return _client


def close_client():
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_grades_collection() -> Collection:
    return get_client()[settings.MONGO_DB_NAME][settings.GRADES_COLLECTION]


def ping() -> bool:
    """연결 상태 확인"""
    try:
        get_client().admin.command("ping")
        return True
    except PyMongoError as e:
        logger.error(f"MongoDB ping 실패: {e}")
        return False


def ensure_indexes(collection: Collection) -> bool:
    """
    grades 컬렉션 인덱스 생성 (learner_id / class_id / learner_id+class_id)
    - 동일 스펙 인덱스는 Mongo에서 no-op 이므로 여러 번 호출해도 안전
    - 인덱스는 조회 성능용이라 실패해도 서버는 계속 기동
    """
    try:
        names = collection.create_indexes(GRADE_INDEXES)
        logger.info(f"grades 인덱스 확인 완료: {names}")
        return True
    except PyMongoError as e:
        logger.warning(f"grades 인덱스 생성 실패 (조회는 계속 가능): {e}")
        return False

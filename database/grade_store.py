"""
database/grade_store.py

- grades 컬렉션 조회 전용 저장소 (쓰기 경로 없음)
- 필터는 Mongo에 그대로 넘기고, 결과 문서는 GradeRecord로 변환
- PyMongoError → StoreUnavailableError (재시도 없음)
"""

import logging
from typing import Any, Dict, List, Optional

from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from models.grades import CLASS_ID, LEARNER_ID, to_record
from schemas.grades import GradeRecord
from utils.errors import StoreUnavailableError

logger = logging.getLogger(__name__)

# _id 는 응답에 필요 없으므로 제외
_PROJECTION = {"_id": 0}


class GradeStore:
    def __init__(self, collection: Collection):
        self.collection = collection

    def find_by_learner(self, learner_id: int, class_id: Optional[int] = None) -> List[GradeRecord]:
        query: Dict[str, Any] = {LEARNER_ID: learner_id}
        if class_id is not None:
            query[CLASS_ID] = class_id
        return self._find(query)

    def find_by_class(self, class_id: int) -> List[GradeRecord]:
        return self._find({CLASS_ID: class_id})

    def find_all(self) -> List[GradeRecord]:
        return self._find({})

    def _find(self, query: Dict[str, Any]) -> List[GradeRecord]:
        try:
            docs = list(self.collection.find(query, _PROJECTION))
        except PyMongoError as e:
            logger.error(f"grades 조회 실패: query={query}, error={e}")
            raise StoreUnavailableError("Error fetching grades") from e
        return [to_record(doc) for doc in docs]

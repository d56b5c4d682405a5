import json
import logging

from pymongo import ReplaceOne

from database.db import close_client, ensure_indexes, get_grades_collection
from models.grades import CLASS_ID, LEARNER_ID, to_record

JSON_PATH = "data/grades.json"  # ✅ 파일 경로 (문서 배열 또는 한 줄에 문서 하나)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def load_documents(path: str):
    with open(path, encoding="utf-8-sig") as f:
        text = f.read().strip()
    if text.startswith("["):
        return json.loads(text)
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def build_upserts(raw_docs):
    """학습자+반 기준 upsert 목록 (같은 파일을 다시 적재해도 문서가 늘지 않음)"""
    latest = {}
    for raw in raw_docs:
        record = to_record(raw)                      # 필드 정규화 (learner_id/class_id 정수, 유형 검사)
        doc = record.model_dump(mode="json")
        latest[(doc[LEARNER_ID], doc[CLASS_ID])] = doc   # 파일 안 중복은 마지막 문서 기준
    return [
        ReplaceOne({LEARNER_ID: learner_id, CLASS_ID: class_id}, doc, upsert=True)
        for (learner_id, class_id), doc in latest.items()
    ]


def migrate_grades(path: str = JSON_PATH):
    collection = get_grades_collection()
    ops = build_upserts(load_documents(path))

    try:
        ensure_indexes(collection)
        if ops:
            result = collection.bulk_write(ops)
            logger.info(f"upsert {result.upserted_count}건, 갱신 {result.modified_count}건")
    finally:
        close_client()
    logger.info(f"✅ 성적 JSON → MongoDB 적재 완료: {len(ops)}건")
    return len(ops)


if __name__ == "__main__":
    migrate_grades()

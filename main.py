from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging

from config.settings import settings
from database.db import close_client, ensure_indexes, get_grades_collection, ping

logging.basicConfig(level=settings.LOG_LEVEL)
# pymongo 내부 디버그 로그 비활성화
logging.getLogger("pymongo").setLevel(logging.WARNING)
logger = logging.getLogger(__name__)


# ✅ 미들웨어 임포트
from middlewares.timing import TimingMiddleware
from middlewares.error_handler import add_error_handlers

# ✅ 라우터 임포트
from routers import grades_agg

app = FastAPI(
    title=settings.APP_TITLE,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
)

# ✅ CORS 설정
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET"],
    allow_headers=["*"],
)

# ✅ 요청 지연 측정 미들웨어 (응답 헤더 X-Latency-Ms 추가)
app.add_middleware(TimingMiddleware)

# ✅ 전역 에러 핸들러 등록 (일관된 JSON 에러 포맷)
add_error_handlers(app)

# ✅ /v1 프리픽스 라우터 등록
app.include_router(grades_agg.router, prefix="/v1")

# ✅ 헬스체크 엔드포인트
@app.get("/health")
def health_check():
    return {"status": "ok", "message": "API is running"}

@app.get("/health/db")
def health_check_db():
    if not ping():
        return JSONResponse(status_code=503, content={"status": "error", "message": "MongoDB unreachable"})
    return {"status": "ok", "message": "MongoDB is reachable"}

# ✅ 기동 시 1회: 인덱스 생성 (idempotent, 실패해도 서버 시작)
@app.on_event("startup")
def _init_indexes():
    logger.info(f"grades 컬렉션: {settings.MONGO_DB_NAME}.{settings.GRADES_COLLECTION}")
    ensure_indexes(get_grades_collection())

@app.on_event("shutdown")
def _close_mongo():
    close_client()

# ✅ 루트 엔드포인트
@app.get("/")
def root():
    return {"message": f"{settings.APP_TITLE} - 성적 가중 평균 통계"}

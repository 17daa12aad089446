import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from vacation_api.core import config
from vacation_api.database import Base, engine, ensure_status_schema
from vacation_api.models import user, vacation  # noqa: F401  registers tables on Base
from vacation_api.routes import user_routes, vacation_routes

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

config.validate_runtime_config()

app = FastAPI(title='Vacation Requests API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=config.CORS_ALLOW_METHODS,
    allow_headers=config.CORS_ALLOW_HEADERS,
    max_age=config.CORS_MAX_AGE,
)


@app.on_event('startup')
def initialize_database() -> None:
    try:
        Base.metadata.create_all(bind=engine)
        ensure_status_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={'error': '404 Not Found'})
    return JSONResponse(status_code=exc.status_code, content={'error': exc.detail}, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error for %s %s', request.method, request.url.path)
    return JSONResponse(status_code=500, content={'error': 'Internal Server Error'})


@app.get('/')
def root():
    return {'status': 'Vacation API Running'}


app.include_router(user_routes.router, prefix='/users')
app.include_router(vacation_routes.router, prefix='/vacations')

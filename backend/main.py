import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from backend.core import config
from backend.core.errors import AppError, UnauthorizedError
from backend.core.logger import configure_logging
from backend.database import SessionLocal, init_db
from backend.routes import account_routes, admin_routes, complaint_routes
from backend.services.accounts import ensure_default_admin

configure_logging()
config.validate_runtime_config()

app = FastAPI(title='Complaint Management API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

logger = logging.getLogger(__name__)


@app.exception_handler(AppError)
def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    headers = {'WWW-Authenticate': 'Bearer'} if isinstance(exc, UnauthorizedError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={'success': False, 'message': exc.message},
        headers=headers,
    )


@app.exception_handler(RequestValidationError)
def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            'success': False,
            'message': 'Invalid request body',
            'errors': jsonable_encoder(exc.errors()),
        },
    )


@app.exception_handler(SQLAlchemyError)
def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception('Database error on %s %s', request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={'success': False, 'message': 'Internal server error'},
    )


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception('Unhandled error on %s %s', request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={'success': False, 'message': 'Internal server error'},
    )


@app.on_event('startup')
def initialize_database() -> None:
    try:
        init_db()
        db = SessionLocal()
        try:
            ensure_default_admin(db)
        finally:
            db.close()
    except (SQLAlchemyError, AppError):
        logger.exception('Database initialization failed. Check DATABASE_URL.')


@app.get('/')
def root():
    return {'status': 'Complaint Management API Running'}


@app.get('/ping')
def ping():
    return {'message': config.PING_MESSAGE}


app.include_router(account_routes.router, prefix=f'{config.API_PREFIX}/accounts')
app.include_router(complaint_routes.router, prefix=f'{config.API_PREFIX}/complaint')
app.include_router(admin_routes.router, prefix=f'{config.API_PREFIX}/admin')

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from shoplist.core.config import settings
from shoplist.core.logging import logger, request_id_middleware
from shoplist.core.errors import (
	AppError,
	app_error_handler,
	http_exception_handler,
	unexpected_exception_handler,
	validation_exception_handler,
)
from shoplist.db.session import SessionLocal, init_db
from shoplist.db.seed import seed_startup_data

from shoplist.routers.auth import router as auth_router
from shoplist.routers.shopping_lists import router as shopping_lists_router
from shoplist.routers.sharing import router as sharing_router
from shoplist.routers.items import router as items_router
from shoplist.routers.categories import router as categories_router
from shoplist.routers.products import router as products_router
from shoplist.routers.recommendations import router as recommendations_router
from shoplist.routers.recipes import router as recipes_router
from shoplist.routers.users import router as users_router
from shoplist.routers.admin import router as admin_router


@asynccontextmanager
async def lifespan(app: FastAPI):
	# DB init
	init_db()
	seed_startup_data(SessionLocal)
	logger.info("%s started", settings.APP_NAME)
	yield

def create_app() -> FastAPI:
	app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

	# Middleware
	app.middleware("http")(request_id_middleware)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=settings.CORS_ORIGINS,
		allow_credentials=True,
		allow_methods=["*"],
		allow_headers=["*"],
		expose_headers=["X-Request-Id"],
	)

	# Every error leaves as {"error": message}
	app.add_exception_handler(AppError, app_error_handler)
	app.add_exception_handler(StarletteHTTPException, http_exception_handler)
	app.add_exception_handler(RequestValidationError, validation_exception_handler)
	app.add_exception_handler(Exception, unexpected_exception_handler)

	# Routers
	app.include_router(auth_router)
	app.include_router(shopping_lists_router)
	app.include_router(sharing_router)
	app.include_router(items_router)
	app.include_router(categories_router)
	app.include_router(products_router)
	app.include_router(recommendations_router)
	app.include_router(recipes_router)
	app.include_router(users_router)
	app.include_router(admin_router)

	@app.get("/health")
	def health():
		return {"status": "OK"}

	return app

app = create_app()

if __name__ == "__main__":
	import uvicorn

	uvicorn.run("shoplist.main:app", host="0.0.0.0", port=8000)

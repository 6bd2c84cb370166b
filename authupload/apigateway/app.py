from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..authservice import AuthConfig, AuthService, CredentialHasher, TokenIssuer, auth_router, set_auth_service
from ..authservice.contracts import UserRepoPort
from ..database import Database, SqlFileRepo, SqlUserRepo
from ..healthservice import HealthService, HealthSettings, health_router, set_health_service
from ..objectstorage import ObjectStoreClient, make_object_store_from_env
from ..uploadservice import UploadService, UploadSettings, set_upload_service, upload_router
from ..uploadservice.contracts import FileRepoPort
from .errors import install_exception_handlers
from .observability import RequestContextMiddleware, configure_logging
from .settings import APP_NAME, AppSettings

log = logging.getLogger("authupload.apigateway")


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    database: Optional[Database] = None,
    object_store: Optional[ObjectStoreClient] = None,
    auth_config: Optional[AuthConfig] = None,
    hasher: Optional[CredentialHasher] = None,
    user_repo: Optional[UserRepoPort] = None,
    file_repo: Optional[FileRepoPort] = None,
    upload_settings: Optional[UploadSettings] = None,
    health_settings: Optional[HealthSettings] = None,
) -> FastAPI:
    """Build the application and install every service singleton.

    Each collaborator can be passed in; anything omitted is built from the
    environment. Fails fast (``ConfigurationError``) when JWT_SECRET is unset.
    """
    settings = settings or AppSettings()
    configure_logging(settings.LOG_LEVEL)

    db = database or Database()
    db.init_db()

    auth_cfg = auth_config or AuthConfig()
    issuer = TokenIssuer(auth_cfg)
    set_auth_service(AuthService(
        user_repo=user_repo or SqlUserRepo(db),
        issuer=issuer,
        hasher=hasher,
        cfg=auth_cfg,
    ))

    store = object_store or make_object_store_from_env()
    set_upload_service(UploadService(store, file_repo or SqlFileRepo(db), upload_settings))
    set_health_service(HealthService(db.ping, health_settings))

    app = FastAPI(title=APP_NAME, version=settings.APP_VERSION)

    origins = settings.cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestContextMiddleware)

    install_exception_handlers(app, production=settings.is_production)

    prefix = settings.route_prefix()
    for router in (auth_router, upload_router, health_router):
        app.include_router(router, prefix=prefix)

    app.state.settings = settings
    app.state.database = db
    log.info("app.ready env=%s prefix=%s store=%s", settings.NODE_ENV, prefix, store.adapter_name)
    return app


def main() -> None:
    import uvicorn

    settings = AppSettings()
    uvicorn.run("authupload.apigateway.app:create_app", factory=True, host="0.0.0.0", port=settings.PORT)


if __name__ == "__main__":
    main()

"""
URL configuration for the Forklift Service Tracker.
"""
import logging

from django.contrib import admin
from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.urls import path
from ninja import NinjaAPI

logger = logging.getLogger('apps.api')

api = NinjaAPI(
    title="Forklift Service Tracker API",
    version="1.0.0",
    description="Company-scoped forklift maintenance records",
    docs_url="/docs",
)


@api.exception_handler(PermissionDenied)
def permission_denied(request, exc):
    message = str(exc) or "Access denied"
    logger.warning(f"Permission denied on {request.method} {request.path}: {message}")
    return api.create_response(request, {"detail": message}, status=403)


@api.exception_handler(ValidationError)
def validation_error(request, exc):
    return api.create_response(request, {"detail": " ".join(exc.messages)}, status=400)


@api.exception_handler(ValueError)
def value_error(request, exc):
    return api.create_response(request, {"detail": str(exc)}, status=400)


@api.exception_handler(ObjectDoesNotExist)
def not_found(request, exc):
    return api.create_response(request, {"detail": str(exc) or "Not found"}, status=404)


from apps.identity.api import router as identity_router
from apps.companies.api import router as companies_router
from apps.forklifts.api import router as forklifts_router
from apps.audit.api import router as audit_router
from apps.core.api import router as core_router

api.add_router("/identity/", identity_router)
api.add_router("/companies/", companies_router)
api.add_router("/audit/", audit_router)
api.add_router("/forklifts/", forklifts_router)
api.add_router("/i18n/", core_router)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]

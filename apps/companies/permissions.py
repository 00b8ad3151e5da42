from functools import wraps
from typing import Callable

from django.http import HttpRequest
from ninja.errors import HttpError

from apps.identity.api import require_auth
from .models import Company
from .services import is_company_admin


def company_admin_required(denied_message: str):
    """
    Decorator for company-scoped endpoints taking a `company_id` path
    parameter. Authenticates the caller, checks admin rights and hands the
    view `request.current_user` and `request.company`.

    Usage:
        @router.post("/{company_id}/regenerate-code")
        @company_admin_required("Only company admins can regenerate join codes")
        def regenerate(request, company_id: UUID):
            ...
    """
    def decorator(view_func: Callable):
        @wraps(view_func)
        def wrapper(request: HttpRequest, *args, **kwargs):
            user = require_auth(request)
            company_id = kwargs.get('company_id')

            if company_id is None or not is_company_admin(user.id, company_id):
                raise HttpError(403, denied_message)

            request.current_user = user
            request.company = Company.objects.get(id=company_id)
            return view_func(request, *args, **kwargs)
        return wrapper
    return decorator

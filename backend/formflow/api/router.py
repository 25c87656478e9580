from fastapi import APIRouter

from formflow.api.endpoints import auth, forms, responses, users, private_users, admin

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(forms.router, prefix="/forms", tags=["Forms"])
api_router.include_router(responses.router, prefix="/responses", tags=["Responses"])
api_router.include_router(users.router, prefix="/user", tags=["User"])
api_router.include_router(private_users.router, prefix="/private-users", tags=["Private Users"])
api_router.include_router(private_users.private_router, prefix="/private", tags=["Private Users"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from shoplist.db.session import get_db
from shoplist.db.models import User
from shoplist.schemas.auth import RegisterRequest, LoginRequest, UserOut
from shoplist.core.security import get_current_user
from shoplist.core.logging import log_event, request_id
from shoplist.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

@router.post("/register", status_code=201)
def register(request: Request, payload: RegisterRequest, db: Session = Depends(get_db)):
	user, token = AuthService(db).register(
		email=payload.email,
		username=payload.username,
		password=payload.password,
		name=payload.name,
	)
	log_event("user_registered", user_id=user.id, email=user.email, request_id=request_id(request))
	return {"user": UserOut.model_validate(user), "token": token}

@router.post("/login")
def login(request: Request, payload: LoginRequest, db: Session = Depends(get_db)):
	user, token = AuthService(db).login(email=payload.email, password=payload.password)
	log_event("user_login", user_id=user.id, request_id=request_id(request))
	return {"user": UserOut.model_validate(user), "token": token}

@router.post("/logout")
def logout():
	# Tokens are stateless; the client drops its copy and it lapses at expiry.
	return {"message": "Logged out. Remove the token on the client."}

@router.get("/me")
def me(user: User = Depends(get_current_user)):
	return {"user": UserOut.model_validate(user)}

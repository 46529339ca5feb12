from fastapi import FastAPI, Depends, HTTPException
from fastapi.middleware.cors import CORSMiddleware
import os
import logging
from dotenv import load_dotenv

from models.schemas_auth import SessionLogin, SessionOut, TokenResponse
from utils.auth_utils import (
    allowed_domains_for, is_allowed_domain, get_email_domain, create_session_token, BLOCKED_UNIVERSITIES,
)
from utils.session_auth import auth_session
from scholarship.routes import router as scholarship_router

load_dotenv()

logging.basicConfig(level=logging.INFO)
logging.info("App starting with SCHOLARSHIP_DATA_SOURCE=%s", os.getenv("SCHOLARSHIP_DATA_SOURCE", "files"))

app = FastAPI(title="Scholarship Calculator")

ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scholarship_router)


@app.post("/auth/login", response_model=TokenResponse, tags=["auth"], summary="Open a calculator session")
def login(payload: SessionLogin):
    slug = payload.slug.strip().lower()
    if slug in BLOCKED_UNIVERSITIES:
        raise HTTPException(status_code=403, detail=f"{BLOCKED_UNIVERSITIES[slug]} is not available yet")
    allowed = allowed_domains_for(slug)
    if allowed is None:
        raise HTTPException(status_code=404, detail="University not found")
    email = payload.email.lower()
    if not is_allowed_domain(get_email_domain(email), allowed):
        logging.info(f"Login rejected for domain {get_email_domain(email)} on {slug}")
        raise HTTPException(status_code=403, detail="Email domain not allowed for this university")
    return TokenResponse(
        access_token=create_session_token(email, slug),
        session=SessionOut(email=email, slug=slug),
    )


@app.get("/auth/session", response_model=SessionOut, tags=["auth"], summary="Current session")
def current_session(session: SessionOut = Depends(auth_session)):
    return session


@app.get("/health", tags=["meta"], summary="Health check")
def health():
    return {"status": "ok"}

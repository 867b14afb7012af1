# app/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.config import settings
from app.database import Base, engine
from app.api import auth, bookings, payments, review, session, users

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

# Create database tables
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="LinguaLink API", debug=settings.DEBUG)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(auth.router)      # /auth/*
app.include_router(users.router)     # /users/*
app.include_router(payments.router)  # /payments/*
app.include_router(bookings.router)  # /bookings/*
app.include_router(session.router)   # /sessions/*
app.include_router(review.router)    # /reviews/*


@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "message": "LinguaLink API is running",
        "version": "1.0.0",
    }

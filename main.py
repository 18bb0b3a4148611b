import logging

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from bookclub.core.config import settings
from bookclub.core.errors import BookClubError
from bookclub.core.logging import configure_logging
from bookclub.models import tables  # noqa: F401
from bookclub.routes.book.book_routers import book_router
from bookclub.routes.club.club_routers import club_router
from bookclub.routes.user.user_routers import user_router

configure_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Book Club API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(user_router)
app.include_router(club_router)
app.include_router(book_router)


@app.exception_handler(BookClubError)
async def book_club_error_handler(request: Request, exc: BookClubError):
    logger.info("%s %s -> %s: %s", request.method, request.url.path, exc.reason, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "reason": exc.reason},
        headers=headers,
    )


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>Book Club</title>
        </head>
        <body>
            <h1>Welcome to the Book Club API!</h1>
            <p>See the API documentation <a href="/docs">here</a>.</p>
        </body>
    </html>
    """

"""Password hashing (bcrypt via passlib)."""

from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from blog_backend.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


async def hash_password(plain: str) -> str:
    """Hash a plaintext password. bcrypt is CPU-bound, so it runs in the threadpool."""
    return await run_in_threadpool(pwd_context.hash, plain)


async def verify_password(plain: str, hashed: str) -> bool:
    return await run_in_threadpool(pwd_context.verify, plain, hashed)

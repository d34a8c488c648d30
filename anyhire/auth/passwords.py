"""bcrypt password hashing.

bcrypt is deliberately slow, so the async helpers run it on the threadpool.
"""

import bcrypt as _bcrypt
from starlette.concurrency import run_in_threadpool


def hash_password(password: str) -> str:
    return _bcrypt.hashpw(password.encode(), _bcrypt.gensalt()).decode()


def check_password(password: str, password_hash: str) -> bool:
    try:
        return _bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Malformed stored hash
        return False


async def hash_password_async(password: str) -> str:
    return await run_in_threadpool(hash_password, password)


async def check_password_async(password: str, password_hash: str) -> bool:
    return await run_in_threadpool(check_password, password, password_hash)

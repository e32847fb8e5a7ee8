# userauth/crud/user.py

import re

from sqlalchemy.exc import IntegrityError
from sqlmodel import func, select
from sqlmodel.ext.asyncio.session import AsyncSession
from userauth.models.user import User

# Constraint or column name; it comes before the clashing value in the message
_UNIQUE_COLUMN = re.compile(r"user\.(email|username)\b|\((email|username)\)=|ix_user_(email|username)\b")


class UserAlreadyExistsError(Exception):
    """
    Unique constraint hit on insert/update.
    `field` names the column that clashed ("username" or "email").
    """

    def __init__(self, field: str):
        super().__init__(f"User with this {field} already exists")
        self.field = field


class UserNotFoundError(Exception):
    pass


def _duplicate_field(error: IntegrityError) -> str:
    # sqlite: "UNIQUE constraint failed: user.email"
    # postgres: 'duplicate key value violates unique constraint "ix_user_email"'
    #           'Key (email)=(...) already exists.'
    message = str(error.orig).lower()
    match = _UNIQUE_COLUMN.search(message)
    if match is None:
        return "username"
    return next(group for group in match.groups() if group)


async def _save(session: AsyncSession, user: User) -> User:
    session.add(user)
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise UserAlreadyExistsError(_duplicate_field(e)) from e
    await session.refresh(user)
    return user


async def create_user(
        session: AsyncSession,
        username: str,
        email: str,
        hashed_password: str,
        image_url: str | None = None
) -> User:
    """
    Creates a User
    - User Name
    - Email
    - Hashed Password
    - Image URL (Optional)
    """
    user = User(
        username=username,
        email=email,
        password=hashed_password,
        image_url=image_url,
    )
    return await _save(session, user)


async def get_user_by_id(
        session: AsyncSession,
        user_id: int
) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_email(
        session: AsyncSession,
        email: str
) -> User | None:
    """
    Returns User by E-mail
    """
    statement = select(User).where(User.email == email)
    result = await session.exec(statement)
    return result.first()


async def get_user_by_username(
        session: AsyncSession,
        username: str
) -> User | None:
    """
    Returns User by User Name
    """
    statement = select(User).where(User.username == username)
    result = await session.exec(statement)
    return result.first()


async def get_user_by_username_or_email(
        session: AsyncSession,
        username_or_email: str
) -> User | None:
    # Usernames never contain "@"
    if "@" in username_or_email:
        return await get_user_by_email(session, username_or_email)
    return await get_user_by_username(session, username_or_email)


async def update_user_info(
        session: AsyncSession,
        user_id: int,
        username: str | None = None,
        email: str | None = None,
        hashed_password: str | None = None
) -> User:
    """
    Only the given values are changed
    """
    user = await session.get(User, user_id)
    if not user:
        raise UserNotFoundError(f"User {user_id} not found")

    if username:
        user.username = username
    if email:
        user.email = email
    if hashed_password:
        user.password = hashed_password

    return await _save(session, user)


async def update_user_password(
        session: AsyncSession,
        user_id: int,
        hashed_password: str
) -> User:
    return await update_user_info(session, user_id, hashed_password=hashed_password)


async def update_user_image(
        session: AsyncSession,
        user_id: int,
        image_url: str
) -> User:
    """
    Updates User Image
    """
    user = await session.get(User, user_id)
    if not user:
        raise UserNotFoundError(f"User {user_id} not found")

    user.image_url = image_url
    return await _save(session, user)


async def delete_user(
        session: AsyncSession,
        user_id: int
) -> bool:
    user = await session.get(User, user_id)
    if not user:
        return False

    await session.delete(user)
    await session.commit()
    return True


async def count_users(session: AsyncSession) -> int:
    statement = select(func.count()).select_from(User)
    result = await session.exec(statement)
    return result.one()

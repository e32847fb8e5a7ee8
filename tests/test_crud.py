"""
User persistence tests
"""

import pytest
from sqlalchemy.exc import IntegrityError

from userauth.crud import user as crud_user
from userauth.crud.user import UserAlreadyExistsError, UserNotFoundError, _duplicate_field


async def make_user(db, username="harold", email="harold@example.com"):
    return await crud_user.create_user(db, username=username, email=email, hashed_password="hashed")


class TestUserCrud:
    @pytest.mark.asyncio
    async def test_create_and_lookup(self, db):
        user = await make_user(db)

        assert user.id is not None
        assert user.created_at is not None
        assert (await crud_user.get_user_by_id(db, user.id)).username == "harold"
        assert (await crud_user.get_user_by_email(db, "harold@example.com")).id == user.id
        assert (await crud_user.get_user_by_username(db, "harold")).id == user.id

    @pytest.mark.asyncio
    async def test_lookup_by_username_or_email(self, db):
        user = await make_user(db)

        assert (await crud_user.get_user_by_username_or_email(db, "harold")).id == user.id
        assert (await crud_user.get_user_by_username_or_email(db, "harold@example.com")).id == user.id
        assert await crud_user.get_user_by_username_or_email(db, "nobody") is None

    @pytest.mark.asyncio
    async def test_duplicate_username(self, db):
        await make_user(db)
        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await make_user(db, email="other@example.com")
        assert exc_info.value.field == "username"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, db):
        await make_user(db)
        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await make_user(db, username="other")
        assert exc_info.value.field == "email"

    @pytest.mark.asyncio
    async def test_update_only_given_fields(self, db):
        user = await make_user(db)
        updated = await crud_user.update_user_info(db, user.id, email="new@example.com")

        assert updated.email == "new@example.com"
        assert updated.username == "harold"
        assert updated.password == "hashed"

    @pytest.mark.asyncio
    async def test_update_to_taken_username(self, db):
        await make_user(db)
        other = await make_user(db, username="other", email="other@example.com")
        # The rollback expires every loaded instance
        other_id = other.id

        with pytest.raises(UserAlreadyExistsError) as exc_info:
            await crud_user.update_user_info(db, other_id, username="harold")
        assert exc_info.value.field == "username"

        stored = await crud_user.get_user_by_id(db, other_id)
        assert stored.username == "other"
        assert stored.email == "other@example.com"
        assert await crud_user.count_users(db) == 2

    @pytest.mark.asyncio
    async def test_update_missing_user(self, db):
        with pytest.raises(UserNotFoundError):
            await crud_user.update_user_password(db, 999, "hashed")
        with pytest.raises(UserNotFoundError):
            await crud_user.update_user_image(db, 999, "https://example.com/a.png")

    @pytest.mark.asyncio
    async def test_update_image(self, db):
        user = await make_user(db)
        updated = await crud_user.update_user_image(db, user.id, "https://example.com/a.png")
        assert updated.image_url == "https://example.com/a.png"

    @pytest.mark.asyncio
    async def test_delete_and_count(self, db):
        user = await make_user(db)
        await make_user(db, username="other", email="other@example.com")
        assert await crud_user.count_users(db) == 2

        assert await crud_user.delete_user(db, user.id) is True
        assert await crud_user.delete_user(db, user.id) is False
        assert await crud_user.count_users(db) == 1

    @pytest.mark.asyncio
    async def test_deleted_ids_are_not_reused(self, db):
        user = await make_user(db)
        user_id = user.id
        await crud_user.delete_user(db, user_id)

        replacement = await make_user(db, username="maude", email="maude@example.com")
        assert replacement.id != user_id


def integrity_error(message):
    return IntegrityError("INSERT INTO user ...", {}, Exception(message))


class TestDuplicateField:
    def test_sqlite_messages(self):
        assert _duplicate_field(integrity_error("UNIQUE constraint failed: user.email")) == "email"
        assert _duplicate_field(integrity_error("UNIQUE constraint failed: user.username")) == "username"

    def test_postgres_message_with_email_in_value(self):
        message = (
            'duplicate key value violates unique constraint "ix_user_username"\n'
            "DETAIL:  Key (username)=(myemailfan) already exists."
        )
        assert _duplicate_field(integrity_error(message)) == "username"

    def test_postgres_email_clash(self):
        message = (
            'duplicate key value violates unique constraint "ix_user_email"\n'
            "DETAIL:  Key (email)=(username@example.com) already exists."
        )
        assert _duplicate_field(integrity_error(message)) == "email"

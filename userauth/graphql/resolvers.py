# userauth/graphql/resolvers.py

import logging
from dataclasses import asdict
from html import escape
from typing import Annotated, Any

import strawberry
from pydantic.alias_generators import to_camel
from redis.exceptions import RedisError
from strawberry.types import Info

from userauth.core.configuration import settings
from userauth.core.email import send_email
from userauth.core.security import dummy_verify, get_password_hash, verify_password
from userauth.crud import user as crud_user
from userauth.crud.user import UserAlreadyExistsError, UserNotFoundError
from userauth.graphql.permissions import IsAuthenticated
from userauth.graphql.types import ChangeInfoInput, FieldError, RegisterInput, UserResponse, UsernamePasswordInput, UserType
from userauth.schemas.user import ChangeInfoIn, ChangePasswordIn, ImageUrlIn, RegisterIn, validate_input

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username/email or password"


def form_data(values: dict[str, Any], skip_blank: bool = False) -> dict[str, Any]:
    """
    snake_case input values -> camelCase form data.
    None is dropped; with skip_blank empty strings are dropped too.
    """
    return {
        to_camel(key): value
        for key, value in values.items()
        if value is not None and not (skip_blank and value == "")
    }


def already_exists(error: UserAlreadyExistsError) -> UserResponse:
    return UserResponse.error(error.field, f"{error.field.capitalize()} already exists")


def reset_password_email(username: str, token: str) -> str:
    link = f"{settings.FRONTEND_URL.rstrip('/')}/change-password/{token}"
    return f"""
    <div>
      <h2>Hello {escape(username)}</h2>
      <p>Below is a link to reset your password</p>
      <a href="{escape(link)}">Reset Password</a>
    </div>
    """


@strawberry.type
class Query:
    @strawberry.field
    async def me(self, info: Info) -> UserType | None:
        """
        The currently logged in user
        """
        ctx = info.context
        if ctx.user_id is None:
            return None

        user = await crud_user.get_user_by_id(ctx.db, ctx.user_id)
        return UserType.from_model(user) if user else None

    @strawberry.field
    async def get_user(self, info: Info, id: int) -> UserType | None:
        user = await crud_user.get_user_by_id(info.context.db, id)
        return UserType.from_model(user) if user else None

    @strawberry.field
    async def count_users(self, info: Info) -> int:
        return await crud_user.count_users(info.context.db)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def register(self, info: Info, options: RegisterInput) -> UserResponse:
        """
        Creates a user and logs them in
        """
        errors = validate_input(RegisterIn, form_data(asdict(options)))
        if errors:
            return UserResponse.from_errors(errors)

        ctx = info.context
        try:
            user = await crud_user.create_user(
                ctx.db,
                username=options.username,
                email=options.email,
                hashed_password=get_password_hash(options.password),
            )
        except UserAlreadyExistsError as e:
            return already_exists(e)

        await ctx.log_in(user.id)
        logger.info(f"Registered user {user.id} ({user.username})")
        return UserResponse.from_user(user)

    @strawberry.mutation
    async def login(self, info: Info, options: UsernamePasswordInput) -> UserResponse:
        if not options.username_or_email:
            return UserResponse.error("usernameOrEmail", "No username or email supplied")
        if not options.password:
            return UserResponse.error("password", "No password supplied")

        ctx = info.context
        user = await crud_user.get_user_by_username_or_email(ctx.db, options.username_or_email)

        if user is None:
            dummy_verify()
            valid = False
        else:
            valid = verify_password(options.password, user.password)

        if not valid:
            # Same answer whichever of the two was wrong
            logger.info(f"Failed login for {options.username_or_email!r}")
            return UserResponse(errors=[
                FieldError(field="usernameOrEmail", message=INVALID_CREDENTIALS),
                FieldError(field="password", message=INVALID_CREDENTIALS),
            ])

        await ctx.log_in(user.id)
        return UserResponse.from_user(user)

    @strawberry.mutation
    async def logout(self, info: Info) -> bool:
        try:
            await info.context.log_out()
        except RedisError as e:
            logger.error(f"Failed to destroy session: {e}")
            return False
        return True

    @strawberry.mutation
    async def forgot_password(self, info: Info, email: str) -> bool:
        """
        Emails a reset link. Always true, so callers cannot probe which
        emails are registered.
        """
        ctx = info.context
        user = await crud_user.get_user_by_email(ctx.db, email)
        if not user:
            return True

        token = await ctx.reset_tokens.create(user.id)
        await send_email(user.email, reset_password_email(user.username, token))
        return True

    @strawberry.mutation
    async def change_password(
            self,
            info: Info,
            token: str,
            new_password: str,
            confirm_new_password: str
    ) -> UserResponse:
        errors = validate_input(ChangePasswordIn, form_data({
            "new_password": new_password,
            "confirm_new_password": confirm_new_password,
        }))
        if errors:
            return UserResponse.from_errors(errors)

        ctx = info.context
        user_id = await ctx.reset_tokens.consume(token)
        if user_id is None:
            # Expired, already used, or tampered with
            return UserResponse.error("token", "Invalid or expired token")

        try:
            user = await crud_user.update_user_password(ctx.db, user_id, get_password_hash(new_password))
        except UserNotFoundError:
            return UserResponse.error("token", "User no longer exists")

        await ctx.log_in(user.id)
        logger.info(f"Password reset for user {user.id}")
        return UserResponse.from_user(user)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def change_info(
            self,
            info: Info,
            data: Annotated[ChangeInfoInput, strawberry.argument(name="input")]
    ) -> UserResponse:
        """
        Updates only the fields that were given
        """
        errors = validate_input(ChangeInfoIn, form_data(asdict(data), skip_blank=True))
        if errors:
            return UserResponse.from_errors(errors)

        ctx = info.context
        try:
            user = await crud_user.update_user_info(
                ctx.db,
                ctx.user_id,
                username=data.username,
                email=data.email,
                hashed_password=get_password_hash(data.password) if data.password else None,
            )
        except UserAlreadyExistsError as e:
            return already_exists(e)
        except UserNotFoundError:
            return UserResponse.error("username", "User no longer exists")

        return UserResponse.from_user(user)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def upload_img(self, info: Info, image_url: str) -> UserResponse:
        errors = validate_input(ImageUrlIn, {"imageUrl": image_url})
        if errors:
            return UserResponse.from_errors(errors)

        ctx = info.context
        try:
            user = await crud_user.update_user_image(ctx.db, ctx.user_id, image_url)
        except UserNotFoundError:
            return UserResponse.error("imageUrl", "User no longer exists")

        return UserResponse.from_user(user)

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    async def delete_user(self, info: Info) -> bool:
        """
        Deletes the account with every session and reset token it has
        """
        ctx = info.context
        user_id = ctx.user_id

        await crud_user.delete_user(ctx.db, user_id)
        await ctx.sessions.destroy_all(user_id)
        await ctx.reset_tokens.revoke_all(user_id)
        ctx.clear_session()

        logger.info(f"Deleted user {user_id}")
        return True

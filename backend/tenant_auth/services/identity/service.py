"""
IdentityService
===============

Aggregate service responsible for managing the `User` aggregate:
- Registration (self-service customers and admin-created staff)
- Authentication (verification only, no token issuance)
- Retrieval and listing
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from tenant_auth.models.role import Role
from tenant_auth.models.user import User
from tenant_auth.repositories.user import UserRepository
from tenant_auth.services._shared.base import BaseService
from tenant_auth.services._shared.dto import PageMeta, PageOut, PaginationIn
from tenant_auth.services._shared.errors import (
    AuthError,
    ConflictError,
    NotFoundError,
    violates,
)
from tenant_auth.services.identity.dto import (
    UserAuthIn,
    UserAuthOut,
    UserCreateIn,
    UserFilterIn,
    UserPublicOut,
    UserRegisterIn,
)

log = logging.getLogger(__name__)

EMAIL_TAKEN = "email already exists"


def _to_public(user: User) -> UserPublicOut:
    return UserPublicOut(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        role=user.role,
        tenant_id=user.tenant_id,
        created_at=user.created_at,
    )


class IdentityService(BaseService):
    """
    Application service for the `User` aggregate.

    Responsibilities
    ----------------
    - Register users ensuring email uniqueness.
    - Authenticate credentials.
    - Retrieve users and their current role.
    """

    # --------------------------------------------------------------------- #
    # Registration
    # --------------------------------------------------------------------- #

    def register_customer(self, dto: UserRegisterIn) -> UserPublicOut:
        """
        Register a new customer.

        :param dto: User registration input DTO.
        :type dto: UserRegisterIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises ConflictError: If the email is already registered.
        """
        out = self._create(
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
            password=dto.password,
            role=Role.CUSTOMER,
            tenant_id=None,
        )
        log.info("user.registered", extra={"user_id": out.id})
        return out

    def create_user(self, dto: UserCreateIn) -> UserPublicOut:
        """
        Create a user with an explicit role (admin surface).

        :param dto: Creation input DTO.
        :type dto: UserCreateIn
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises NotFoundError: If ``tenant_id`` names no tenant.
        :raises ConflictError: If the email is already registered.
        """
        out = self._create(
            first_name=dto.first_name,
            last_name=dto.last_name,
            email=dto.email,
            password=dto.password,
            role=dto.role,
            tenant_id=dto.tenant_id,
        )
        log.info(
            "user.created",
            extra={"user_id": out.id, "role": out.role.value, "actor_id": self.ctx.actor_id},
        )
        return out

    def _create(
        self,
        *,
        first_name: str,
        last_name: str,
        email: str,
        password: str,
        role: Role,
        tenant_id: int | None,
    ) -> UserPublicOut:
        with self.rw_uow() as uow:
            repo: UserRepository = uow.users

            if repo.exists_by_email(email):
                raise ConflictError("User", EMAIL_TAKEN)
            if tenant_id is not None and uow.tenants.get(tenant_id) is None:
                raise NotFoundError("Tenant", tenant_id)

            try:
                user = repo.model(
                    first_name=first_name,
                    last_name=last_name,
                    email=email,
                    password=password,  # model hashes via setter
                    role=role,
                    tenant_id=tenant_id,
                )
                repo.add(user)
            except IntegrityError as exc:
                if violates(exc, "uq_users_email"):
                    raise ConflictError("User", EMAIL_TAKEN) from exc
                raise  # unknown integrity error -> bubble up

            return _to_public(user)

    # --------------------------------------------------------------------- #
    # Authentication
    # --------------------------------------------------------------------- #

    def authenticate(self, dto: UserAuthIn) -> UserAuthOut:
        """
        Authenticate a user by email and password.

        Unknown email and wrong password fail identically.

        :param dto: Authentication input DTO.
        :type dto: UserAuthIn
        :returns: Authenticated principal.
        :rtype: UserAuthOut
        :raises AuthError: When credentials are invalid.
        """
        with self.ro_uow() as uow:
            repo: UserRepository = uow.users
            user = repo.authenticate(dto.email, dto.password)
            if user is None:
                raise AuthError()

            return UserAuthOut(id=user.id, email=user.email, role=user.role)

    # --------------------------------------------------------------------- #
    # Retrieval
    # --------------------------------------------------------------------- #

    def get_user(self, user_id: int) -> UserPublicOut:
        """
        Retrieve a user by identifier.

        :param user_id: User primary key.
        :type user_id: int
        :returns: Public-safe user DTO.
        :rtype: UserPublicOut
        :raises NotFoundError: If user does not exist.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            return _to_public(user)

    def get_principal(self, user_id: int) -> UserAuthOut | None:
        """Return id, email and current role of a user, or ``None``."""
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                return None
            return UserAuthOut(id=user.id, email=user.email, role=user.role)

    def list_users(
        self, pagination: PaginationIn, filters: UserFilterIn | None = None
    ) -> PageOut[UserPublicOut]:
        """
        List users page by page.

        :param pagination: Page, limit and sort tokens.
        :param filters: Optional role / tenant filters.
        :returns: Page of public user DTOs.
        """
        pg = self.ensure_pagination(
            page=pagination.page, limit=pagination.limit, sort=pagination.sort
        )
        eq: dict[str, object] = {}
        if filters is not None:
            if filters.role is not None:
                eq["role"] = filters.role
            if filters.tenant_id is not None:
                eq["tenant_id"] = filters.tenant_id

        with self.ro_uow() as uow:
            page = uow.users.paginate(pg, filters=eq)
            items = [_to_public(u) for u in page.items]
        return PageOut(
            items=items, meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total)
        )

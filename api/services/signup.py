# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Account provisioning for users who just signed up.

A new user owns a fresh company: the company is created, the user's profile
is linked to it and the user becomes its admin.
"""

import logging
from datetime import datetime
from opentelemetry import trace

from .mongodb import MongoDBService
from models.entities import Company, UserRole
from models.enums import AppRole

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class SignupError(RuntimeError):
    """Raised when a signed-up user could not be provisioned."""


class SignupService:
    """Creates the company, profile link and admin role of a new user."""

    companies_collection = "companies"
    profiles_collection = "profiles"
    roles_collection = "user_roles"

    def __init__(self, mongo_service: MongoDBService):
        self.mongo_service = mongo_service
        logger.info("Signup service initialized")

    def provision(self, user_id: str, email: str, full_name: str, company_name: str) -> Company:
        """
        Provision a signed-up user.

        Args:
            user_id: Identifier of the authenticated user
            email: User email, also used as the company contact
            full_name: Name stored on the user's profile
            company_name: Name of the company to create

        Returns:
            The created company

        Raises:
            SignupError: If any step fails; a company created before the
                failure is removed again
        """
        company = Company(name=company_name, email=email)

        with tracer.start_as_current_span("signup.provision") as span:
            span.set_attributes({"user.id": user_id, "company.id": company.id})

            try:
                self.mongo_service.get_collection(self.companies_collection).insert_one(company.to_document())
            except Exception as e:
                span.record_exception(e)
                logger.error(f"Failed to create company for user {user_id}: {e}")
                raise SignupError(f"Failed to create company: {e}") from e

            try:
                self._link_profile(user_id, email, full_name, company.id)
                self._grant_admin(user_id, company.id)
            except Exception as e:
                span.record_exception(e)
                logger.error(
                    f"Failed to provision user {user_id}: {e}",
                    extra={"extra_fields": {"company_id": company.id}}
                )
                self._remove_company(company.id)
                raise SignupError(f"Failed to set up user: {e}") from e

        logger.info(
            "User provisioned",
            extra={"extra_fields": {"user_id": user_id, "company_id": company.id}}
        )
        return company

    def _link_profile(self, user_id: str, email: str, full_name: str, company_id: str) -> None:
        now = datetime.utcnow()
        self.mongo_service.get_collection(self.profiles_collection).update_one(
            {"_id": MongoDBService.to_document_id(user_id)},
            {
                "$set": {"company_id": company_id, "full_name": full_name, "updated_at": now},
                "$setOnInsert": {"email": email, "created_at": now}
            },
            upsert=True
        )

    def _grant_admin(self, user_id: str, company_id: str) -> None:
        role = UserRole(user_id=user_id, role=AppRole.ADMIN, company_id=company_id)
        self.mongo_service.get_collection(self.roles_collection).insert_one(role.model_dump())

    def _remove_company(self, company_id: str) -> None:
        try:
            self.mongo_service.get_collection(self.companies_collection).delete_one(
                {"_id": MongoDBService.to_document_id(company_id)}
            )
        except Exception as e:
            logger.error(f"Failed to remove company {company_id} after signup failure: {e}")

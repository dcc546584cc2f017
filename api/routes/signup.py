# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Signup provisioning endpoint.
"""

from flask import jsonify, current_app
from flask_openapi3 import APIBlueprint, Tag

from models.requests import SignupRequest
from models.responses import ErrorResponse, SignupResponse
from middleware.error_handler import CustomException
from services.signup import SignupError

signup_tag = Tag(name="Signup", description="Provisioning of newly registered users")
signup_bp = APIBlueprint(
    'signup',
    __name__,
    url_prefix='/api/signup',
    abp_tags=[signup_tag]
)


@signup_bp.post('/provision', responses={"200": SignupResponse, "400": ErrorResponse})
def provision_user(body: SignupRequest):
    """
    Set up a newly registered user.

    Creates the user's company, links the profile to it and grants the
    ``admin`` role.
    """
    try:
        company = current_app.signup_service.provision(
            body.user_id,
            body.email,
            body.full_name,
            body.company_name
        )
    except SignupError as e:
        raise CustomException(str(e), 400, "signup-failed")

    response = SignupResponse(company_id=company.id)
    return jsonify(response.model_dump(by_alias=True)), 200

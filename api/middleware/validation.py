# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Request validation helpers using Pydantic models.
"""

from typing import Type, Dict, Any, List, TypeVar
from pydantic import BaseModel, ValidationError
from opentelemetry import trace
import logging

from .error_handler import ValidationException

tracer = trace.get_tracer(__name__)
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def format_validation_errors(validation_error: ValidationError) -> List[Dict[str, Any]]:
    """
    Format Pydantic validation errors for API response.

    Args:
        validation_error: Pydantic ValidationError

    Returns:
        List of formatted error dictionaries
    """
    errors = []

    for error in validation_error.errors():
        field_path = ".".join(str(loc) for loc in error["loc"])
        errors.append({
            "field": field_path,
            "message": error["msg"],
            "type": error["type"]
        })

    return errors


def parse_model(model_class: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """
    Validate raw request data against a Pydantic model.

    Raises:
        ValidationException: With formatted field errors when validation fails
    """
    with tracer.start_as_current_span("validation.parse_model") as span:
        span.set_attribute("validation.model", model_class.__name__)

        try:
            parsed = model_class.model_validate(data)
        except ValidationError as e:
            errors = format_validation_errors(e)
            span.set_attribute("validation.result", "invalid")
            logger.debug(
                "Request validation failed",
                extra={"extra_fields": {"model": model_class.__name__, "errors": errors}}
            )
            message = "; ".join(f"{err['field']}: {err['message']}" for err in errors)
            raise ValidationException(f"Invalid request: {message}", errors)

        span.set_attribute("validation.result", "success")
        return parsed

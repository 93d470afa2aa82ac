"""Utilities for handling FastAPI requests."""

import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from .config import Settings

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""
    return request.app.state.settings


async def read_payload(request: Request) -> Any:
    """Decode a request body sent as JSON or as a URL-encoded form.

    Raises:
        RequestValidationError: If a JSON body is not valid UTF-8 or not JSON
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPE):
        form = await request.form()
        return {key: value for key, value in form.items()}

    try:
        return await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        position = e.pos if isinstance(e, json.JSONDecodeError) else e.start
        raise RequestValidationError(
            [
                {
                    "type": "json_invalid",
                    "loc": ("body", position),
                    "msg": "JSON decode error",
                    "input": {},
                }
            ]
        ) from e


def body_parser(model: type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    """Build a dependency validating the request body into `model`.

    Both JSON and URL-encoded bodies are accepted.
    """

    async def dependency(request: Request) -> ModelT:
        payload = await read_payload(request)
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            errors = e.errors(
                include_url=False, include_context=False, include_input=False
            )
            raise RequestValidationError(
                [{**error, "loc": ("body", *error["loc"])} for error in errors]
            ) from e

    return dependency

"""URL validation per resource kind.

Validation is pure computation: it parses the raw URL and checks the
host/path rule for the declared kind. No network access happens here.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple, Union

import pydantic
from pydantic import HttpUrl, TypeAdapter

from .errors import ValidationError
from .models import ReadingResource, ResourceKind

logger = logging.getLogger(__name__)

_URL_ADAPTER = TypeAdapter(HttpUrl)

ARXIV_HOST = "arxiv.org"
SUBSTACK_HOST = "substack.com"


def coerce_kind(value: Union[ResourceKind, str]) -> ResourceKind:
    """Return `value` as a ResourceKind, accepting the enum's string values."""
    try:
        return ResourceKind(value)
    except ValueError as exc:
        raise ValidationError(f"invalid resource type: {value!r}") from exc


def parse_url(raw_url: str) -> HttpUrl:
    """Parse `raw_url` as an absolute http(s) URL with a host."""
    try:
        return _URL_ADAPTER.validate_python(raw_url)
    except pydantic.ValidationError as exc:
        reason = exc.errors()[0].get("msg", "invalid URL") if exc.errors() else "invalid URL"
        raise ValidationError(f"malformed URL: {reason}", raw_url=raw_url) from exc


def validate(kind: Union[ResourceKind, str], raw_url: str) -> HttpUrl:
    """Validate `raw_url` against the rule for `kind` and return the parsed URL."""
    try:
        kind = coerce_kind(kind)
    except ValidationError as exc:
        exc.raw_url = raw_url
        raise

    url = parse_url(raw_url)
    host = url.host or ""
    path = url.path or ""

    if kind is ResourceKind.BLOG:
        return url

    if kind is ResourceKind.SUBSTACK:
        if SUBSTACK_HOST in host and "post" in path:
            return url
        raise ValidationError("invalid Substack URL", raw_url=raw_url)

    if kind is ResourceKind.ARXIV_PDF:
        if host == ARXIV_HOST and "pdf" in path:
            return url
        raise ValidationError("invalid arXiv PDF URL", raw_url=raw_url)

    if kind is ResourceKind.ARXIV_HTML:
        if host == ARXIV_HOST and "html" in path:
            return url
        raise ValidationError("invalid arXiv HTML URL", raw_url=raw_url)

    raise ValidationError("invalid resource type", raw_url=raw_url)


def new_resource(kind: Union[ResourceKind, str], raw_url: str) -> Tuple[ReadingResource, Optional[ValidationError]]:
    """Build a ReadingResource and validate it.

    The resource is always returned, carrying whatever state validation
    reached, together with the validation error if there was one.
    """
    try:
        resolved = coerce_kind(kind)
    except ValidationError as exc:
        exc.raw_url = raw_url
        logger.warning(f"Rejected {raw_url!r}: {exc.message}")
        return ReadingResource(kind=None, raw_url=raw_url), exc

    resource = ReadingResource(kind=resolved, raw_url=raw_url)
    try:
        resource.validated_url = validate(resolved, raw_url)
    except ValidationError as exc:
        logger.warning(f"Rejected {raw_url!r} as {resolved.value}: {exc.message}")
        return resource, exc

    logger.debug(f"Validated {raw_url!r} as {resolved.value}")
    return resource, None

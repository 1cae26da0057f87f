"""Response format negotiation.

Requests are classified by ``Content-Type`` alone. Responses honour the
client's ``Accept`` header first, mirror the request's ``Content-Type``
second, and otherwise fall back to the registry default, so a concrete
format is always chosen while at least one format is enabled.
"""

import logging
from typing import Any, Mapping, Optional

from .resolver import (
    ACCEPT_HEADER,
    CONTENT_TYPE_HEADER,
    HeaderValue,
    header_value,
    resolve_format,
)
from .types import FormatRegistry, FormatTag

logger = logging.getLogger(__name__)


def select_response_format(
    accept: HeaderValue,
    content_type: HeaderValue,
    registry: FormatRegistry,
) -> FormatTag:
    """Select the wire format for an outbound response.

    :param accept: Raw ``Accept`` header value, or None
    :param content_type: Raw ``Content-Type`` header value, or None
    :param registry: Formats enabled for this process
    :return: The negotiated format; ``UNRECOGNIZED`` only when the
        registry enables nothing
    :rtype: FormatTag
    """
    chosen = resolve_format(accept, registry)
    if chosen.is_concrete:
        logger.debug("Response format %s taken from Accept", chosen.value)
        return chosen

    chosen = resolve_format(content_type, registry)
    if chosen.is_concrete:
        logger.debug("Response format %s taken from Content-Type", chosen.value)
        return chosen

    chosen = registry.default
    logger.debug("Response format %s taken from default", chosen.value)
    return chosen


class ContentNegotiator:
    """Applies the negotiation policy to request header mappings.

    :param registry: Formats enabled for this process
    :type registry: FormatRegistry
    """

    def __init__(self, registry: FormatRegistry):
        self.registry = registry

    def request_format(self, headers: Optional[Mapping[str, Any]]) -> FormatTag:
        """Format of an inbound body, from ``Content-Type`` only."""
        return resolve_format(
            header_value(headers, CONTENT_TYPE_HEADER), self.registry
        )

    def response_format(self, headers: Optional[Mapping[str, Any]]) -> FormatTag:
        """Format for the response to a request with these headers."""
        return select_response_format(
            header_value(headers, ACCEPT_HEADER),
            header_value(headers, CONTENT_TYPE_HEADER),
            self.registry,
        )


__all__ = ["select_response_format", "ContentNegotiator"]

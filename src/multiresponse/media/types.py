"""Wire format tags and the registry of enabled formats.

This module defines the closed set of wire formats understood by
multiresponse, their canonical MIME strings, and the registry that
records which of them are enabled for the running process. The
registry is resolved once at startup from configuration and then
passed to the resolver, negotiator and codec dispatcher, so every
"format disabled" path can be exercised at runtime.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional, Tuple

from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..config.settings import Settings

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
PROTOBUF_MEDIA_TYPE = "application/protobuf"
XML_MEDIA_TYPE = "application/xml"
TEXT_XML_MEDIA_TYPE = "text/xml"


class FormatTag(str, Enum):
    """Identifier for a wire format.

    ``UNRECOGNIZED`` is the sentinel produced when a header does not name
    an enabled format. It never has a MIME type and is never enabled.
    """

    JSON = "json"
    PROTOBUF = "protobuf"
    XML = "xml"
    UNRECOGNIZED = "unrecognized"

    @property
    def media_type(self) -> Optional[str]:
        """Canonical MIME string written to the outbound ``Content-Type``."""
        return _CANONICAL_MEDIA_TYPES.get(self)

    @property
    def is_concrete(self) -> bool:
        return self is not FormatTag.UNRECOGNIZED


_CANONICAL_MEDIA_TYPES = {
    FormatTag.JSON: JSON_MEDIA_TYPE,
    FormatTag.PROTOBUF: PROTOBUF_MEDIA_TYPE,
    FormatTag.XML: XML_MEDIA_TYPE,
}

# Order used for the implicit default format.
FORMAT_PRIORITY: Tuple[FormatTag, ...] = (
    FormatTag.JSON,
    FormatTag.PROTOBUF,
    FormatTag.XML,
)


def parse_format(value) -> FormatTag:
    """Convert a configuration value into a concrete :class:`FormatTag`.

    :param value: A ``FormatTag`` or a format name such as ``"json"``
    :return: The matching concrete format tag
    :raises ConfigurationError: If the value does not name a wire format
    """
    if isinstance(value, FormatTag):
        tag = value
    else:
        try:
            tag = FormatTag(str(value).strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown wire format: {value!r}", setting="enabled_formats"
            ) from None
    if not tag.is_concrete:
        raise ConfigurationError(
            f"Unknown wire format: {value!r}", setting="enabled_formats"
        )
    return tag


@dataclass(frozen=True)
class FormatRegistry:
    """Immutable set of wire formats enabled for this process.

    :param enabled: Formats that may be negotiated and (de)serialized
    :type enabled: FrozenSet[FormatTag]
    :param explicit_default: Optional response default overriding the
        priority order
    :type explicit_default: Optional[FormatTag]
    """

    enabled: FrozenSet[FormatTag] = field(default_factory=frozenset)
    explicit_default: Optional[FormatTag] = None

    @classmethod
    def of(
        cls, formats: Iterable, default: Optional[object] = None
    ) -> "FormatRegistry":
        """Build a registry from format tags or names.

        :param formats: Formats to enable
        :param default: Optional explicit default format
        :return: New registry
        :raises ConfigurationError: If any name is not a wire format
        """
        enabled = frozenset(parse_format(f) for f in formats)
        explicit = parse_format(default) if default is not None else None
        return cls(enabled=enabled, explicit_default=explicit)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "FormatRegistry":
        """Build and validate the registry from application settings.

        :param settings: Loaded application settings
        :return: Validated registry
        :raises ConfigurationError: If the configuration enables no format
            or names a default that is not enabled
        """
        registry = cls.of(settings.enabled_formats, settings.default_format)
        registry.validate()
        logger.debug(
            "Enabled wire formats: %s (default: %s)",
            ", ".join(f.value for f in registry.ordered()),
            registry.default.value,
        )
        return registry

    def is_enabled(self, tag: FormatTag) -> bool:
        return tag in self.enabled

    def ordered(self) -> Tuple[FormatTag, ...]:
        """Enabled formats in priority order."""
        return tuple(f for f in FORMAT_PRIORITY if f in self.enabled)

    @property
    def default(self) -> FormatTag:
        """The format used when neither header names an enabled format.

        Returns the explicit default when configured, otherwise the first
        enabled format in :data:`FORMAT_PRIORITY`, otherwise
        ``UNRECOGNIZED`` when nothing is enabled.
        """
        if self.explicit_default is not None and self.is_enabled(
            self.explicit_default
        ):
            return self.explicit_default
        for tag in FORMAT_PRIORITY:
            if tag in self.enabled:
                return tag
        return FormatTag.UNRECOGNIZED

    def validate(self) -> None:
        """Assert the registry is usable for response generation.

        :raises ConfigurationError: If no format is enabled, or the
            explicit default is not among the enabled formats
        """
        if not self.enabled:
            raise ConfigurationError(
                "At least one wire format must be enabled",
                setting="enabled_formats",
            )
        if (
            self.explicit_default is not None
            and self.explicit_default not in self.enabled
        ):
            raise ConfigurationError(
                f"Default format '{self.explicit_default.value}' is not enabled",
                setting="default_format",
            )


__all__ = [
    "FormatTag",
    "FormatRegistry",
    "FORMAT_PRIORITY",
    "JSON_MEDIA_TYPE",
    "PROTOBUF_MEDIA_TYPE",
    "XML_MEDIA_TYPE",
    "TEXT_XML_MEDIA_TYPE",
    "parse_format",
]

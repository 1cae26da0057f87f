"""XML codec backed by xmltodict and pydantic.

Values are dumped to plain data with pydantic and rendered as one root
element named after the type (or ``__xml_root__`` / an explicit
``root_tag``). On the way back in, the root element's children are
validated against the type, so element text is coerced to the declared
field types.

Fields whose schema is an array are always parsed as lists, so a single
repeated element still validates. Empty elements decode as empty
strings; ``None`` fields are left out on encode and fall back to their
defaults on decode.
"""

import logging
from typing import Any, Dict, Iterable, Optional, Sequence
from xml.parsers.expat import ExpatError

import xmltodict
from pydantic import PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from ..exceptions import XmlDeserializeError, XmlSerializeError
from ..media.types import XML_MEDIA_TYPE, FormatTag

logger = logging.getLogger(__name__)

ROOT_ATTRIBUTE = "__xml_root__"


def _resolve(schema: Any, defs: Dict[str, Any]) -> Dict[str, Any]:
    """Follow ``$ref`` links and unwrap optional unions to one schema."""
    seen = set()
    while isinstance(schema, dict):
        ref = schema.get("$ref")
        if ref:
            if ref in seen:
                return {}
            seen.add(ref)
            schema = defs.get(ref.rsplit("/", 1)[-1], {})
            continue
        options = schema.get("anyOf") or schema.get("oneOf") or schema.get("allOf")
        if options and "properties" not in schema:
            branches = [
                o for o in options if isinstance(o, dict) and o.get("type") != "null"
            ]
            if len(branches) == 1:
                schema = branches[0]
                continue
        return schema
    return {}


def _is_array(prop: Any) -> bool:
    if not isinstance(prop, dict):
        return False
    if prop.get("type") == "array":
        return True
    options: Iterable = prop.get("anyOf") or prop.get("oneOf") or ()
    return any(isinstance(o, dict) and o.get("type") == "array" for o in options)


def _array_fields(schema: Dict[str, Any], names: Sequence[str]) -> frozenset:
    """Names of the array fields of the object found at ``names``.

    ``names`` are the element names below the root element. A list field
    appears as repeated elements of the same name, so stepping into one
    continues with the schema of its items.
    """
    defs = schema.get("$defs") or {}
    node = _resolve(schema, defs)
    for name in names:
        prop = (node.get("properties") or {}).get(name)
        if prop is None:
            return frozenset()
        node = _resolve(prop, defs)
        if node.get("type") == "array":
            node = _resolve(node.get("items"), defs)
    return frozenset(
        name
        for name, prop in (node.get("properties") or {}).items()
        if _is_array(prop) or _is_array(_resolve(prop, defs))
    )


def _fill_empty(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, dict):
        return {k: _fill_empty(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_fill_empty(v) for v in value]
    return value


class XmlCodec:
    """Encode and decode one application type as an XML document.

    :param model: Application type; must dump to a mapping
    :param root_tag: Optional root element name
    """

    format = FormatTag.XML
    media_type = XML_MEDIA_TYPE

    def __init__(self, model: Any, root_tag: Optional[str] = None):
        self.model = model
        self.root_tag = (
            root_tag
            or getattr(model, ROOT_ATTRIBUTE, None)
            or getattr(model, "__name__", "payload")
        )
        self._adapter = TypeAdapter(model)
        try:
            self._schema: Optional[Dict[str, Any]] = self._adapter.json_schema()
        except PydanticUserError as e:
            logger.debug("No JSON schema for %r, lists not forced: %s", model, e)
            self._schema = None

    def encode(self, value: Any) -> bytes:
        try:
            fields = self._adapter.dump_python(value, mode="json", exclude_none=True)
            if not isinstance(fields, dict):
                raise TypeError(
                    f"XML payloads must dump to a mapping, got {type(fields).__name__}"
                )
            document = xmltodict.unparse({self.root_tag: fields}, pretty=False)
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise XmlSerializeError(e) from e
        return document.encode("utf-8")

    def decode(self, data: bytes) -> Any:
        try:
            document = xmltodict.parse(data, force_list=self._force_list)
        except ExpatError as e:
            raise XmlDeserializeError(e) from e

        root = next(iter(document.values()), None)
        if root is None:
            root = {}
        if not isinstance(root, dict):
            raise XmlDeserializeError(
                ValueError(f"root element <{self.root_tag}> holds text, not fields")
            )
        try:
            return self._adapter.validate_python(self._children(root))
        except ValidationError as e:
            raise XmlDeserializeError(e) from e

    def _force_list(self, path: Any, key: str, value: Any) -> bool:
        # The root element is never a list.
        if not path or self._schema is None:
            return False
        parent = [name for name, _ in path[1:]]
        return key in _array_fields(self._schema, parent)

    @staticmethod
    def _children(root: Dict[str, Any]) -> Dict[str, Any]:
        return {k: _fill_empty(v) for k, v in root.items() if not k.startswith("@")}

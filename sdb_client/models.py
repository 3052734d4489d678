"""
Item, attribute and response types for the SimpleDB client library.

Response types decode themselves from the XML document returned by the
service. Elements are matched by local name because the service qualifies
every element with its API namespace.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Type, TypeVar
from xml.etree import ElementTree as ET

from .exceptions import DecodeError

T = TypeVar('T', bound='Result')


def _local(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from an element tag."""
    return tag.rsplit('}', 1)[-1]


def _children(element: ET.Element, name: str) -> List[ET.Element]:
    return [child for child in element if _local(child.tag) == name]


def _child(element: Optional[ET.Element], name: str) -> Optional[ET.Element]:
    if element is None:
        return None
    for child in element:
        if _local(child.tag) == name:
            return child
    return None


def _text(element: Optional[ET.Element], name: str) -> str:
    child = _child(element, name)
    if child is None or child.text is None:
        return ""
    return child.text


def _number(element: Optional[ET.Element], name: str, kind=int):
    value = _text(element, name)
    if not value:
        return kind()
    try:
        return kind(value)
    except ValueError:
        raise DecodeError(f"invalid {name} value: {value!r}")


@dataclass
class Attribute:
    """
    A name/value pair attached to an item.

    ``replace`` records whether a write should overwrite the stored value.
    It is carried on the model only and is not sent by the write actions.
    """
    name: str
    value: str
    replace: bool = False

    @classmethod
    def from_xml(cls, element: ET.Element) -> 'Attribute':
        return cls(_text(element, 'Name'), _text(element, 'Value'))


@dataclass
class Item:
    """A named record holding an ordered list of attributes."""
    name: str
    attributes: List[Attribute] = field(default_factory=list)

    def add_attribute(self, name: str, value: str) -> Attribute:
        """Append a new attribute and return it. Duplicate names are allowed."""
        attribute = Attribute(name, value)
        self.attributes.append(attribute)
        return attribute

    def remove_attribute(self, attribute: Attribute) -> Optional[Attribute]:
        """
        Remove every attribute matching ``attribute`` on name and value.

        Returns:
            The last removed attribute, or None if nothing matched
        """
        removed = None
        kept = []
        for attr in self.attributes:
            if attr.name == attribute.name and attr.value == attribute.value:
                removed = attr
            else:
                kept.append(attr)
        self.attributes = kept
        return removed

    @classmethod
    def from_xml(cls, element: ET.Element) -> 'Item':
        return cls(
            _text(element, 'Name'),
            [Attribute.from_xml(a) for a in _children(element, 'Attribute')],
        )


@dataclass
class ResponseMetadata:
    request_id: str = ""
    box_usage: float = 0.0

    @classmethod
    def from_xml(cls, root: ET.Element) -> 'ResponseMetadata':
        meta = _child(root, 'ResponseMetadata')
        return cls(_text(meta, 'RequestId'), _number(meta, 'BoxUsage', float))


@dataclass
class Result:
    """Base for the typed success payload of one action."""

    RESULT_TAG = ''

    response_metadata: ResponseMetadata = field(default_factory=ResponseMetadata)

    @classmethod
    def decode(cls: Type[T], body: bytes) -> T:
        """
        Decode a raw response body into this result shape.

        Raises:
            DecodeError: If the body is not XML or has an unexpected root
        """
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise DecodeError(f"malformed XML response: {e}")
        if _local(root.tag) != cls.RESULT_TAG:
            raise DecodeError(
                f"expected <{cls.RESULT_TAG}> response, got <{_local(root.tag)}>"
            )
        return cls.from_xml(root)

    @classmethod
    def from_xml(cls: Type[T], root: ET.Element) -> T:
        return cls(response_metadata=ResponseMetadata.from_xml(root))


@dataclass
class ListDomainsResponse(Result):
    RESULT_TAG = 'ListDomainsResponse'

    domain_names: List[str] = field(default_factory=list)

    @classmethod
    def from_xml(cls, root):
        result = _child(root, 'ListDomainsResult')
        names = [] if result is None else [
            e.text or "" for e in _children(result, 'DomainName')
        ]
        return cls(ResponseMetadata.from_xml(root), names)


@dataclass
class DomainMetadataResponse(Result):
    RESULT_TAG = 'DomainMetadataResponse'

    item_count: int = 0
    item_names_size_bytes: int = 0
    attribute_name_count: int = 0
    attribute_names_size_bytes: int = 0
    attribute_value_count: int = 0
    attribute_values_size_bytes: int = 0
    timestamp: int = 0

    @classmethod
    def from_xml(cls, root):
        result = _child(root, 'DomainMetadataResult')
        return cls(
            ResponseMetadata.from_xml(root),
            item_count=_number(result, 'ItemCount'),
            item_names_size_bytes=_number(result, 'ItemNamesSizeBytes'),
            attribute_name_count=_number(result, 'AttributeNameCount'),
            attribute_names_size_bytes=_number(result, 'AttributeNamesSizeBytes'),
            attribute_value_count=_number(result, 'AttributeValueCount'),
            attribute_values_size_bytes=_number(result, 'AttributeValuesSizeBytes'),
            timestamp=_number(result, 'Timestamp'),
        )


@dataclass
class CreateDomainResponse(Result):
    RESULT_TAG = 'CreateDomainResponse'


@dataclass
class DeleteDomainResponse(Result):
    RESULT_TAG = 'DeleteDomainResponse'


@dataclass
class PutAttributesResponse(Result):
    RESULT_TAG = 'PutAttributesResponse'


@dataclass
class BatchPutAttributesResponse(Result):
    RESULT_TAG = 'BatchPutAttributesResponse'


@dataclass
class DeleteAttributesResponse(Result):
    RESULT_TAG = 'DeleteAttributesResponse'


@dataclass
class GetAttributesResponse(Result):
    RESULT_TAG = 'GetAttributesResponse'

    attributes: List[Attribute] = field(default_factory=list)

    @classmethod
    def from_xml(cls, root):
        result = _child(root, 'GetAttributesResult')
        attributes = [] if result is None else [
            Attribute.from_xml(a) for a in _children(result, 'Attribute')
        ]
        return cls(ResponseMetadata.from_xml(root), attributes)


@dataclass
class SelectResponse(Result):
    RESULT_TAG = 'SelectResponse'

    items: List[Item] = field(default_factory=list)

    @classmethod
    def from_xml(cls, root):
        result = _child(root, 'SelectResult')
        items = [] if result is None else [
            Item.from_xml(i) for i in _children(result, 'Item')
        ]
        return cls(ResponseMetadata.from_xml(root), items)


@dataclass
class ServiceErrorEntry:
    code: str
    message: str
    request_id: str


@dataclass
class ErrorResponse:
    """Error envelope returned with a non-200 status."""
    errors: List[ServiceErrorEntry] = field(default_factory=list)
    request_id: str = ""

    @classmethod
    def decode(cls, body: bytes) -> 'ErrorResponse':
        try:
            root = ET.fromstring(body)
        except ET.ParseError as e:
            raise DecodeError(f"malformed XML error response: {e}")

        request_id = _text(root, 'RequestID') or _text(root, 'RequestId')
        errors = []
        for wrapper in _children(root, 'Errors'):
            for error in _children(wrapper, 'Error'):
                entry_id = _text(error, 'RequestID') or _text(error, 'RequestId')
                errors.append(ServiceErrorEntry(
                    _text(error, 'Code'),
                    _text(error, 'Message'),
                    entry_id or request_id,
                ))
        return cls(errors, request_id)

"""XML-API response decoding.

Every endpoint answers with one of a fixed set of documents. The caller
picks the schema; the decoder checks the root element, parses the child
elements into records and fails loudly on anything it does not understand.
"""

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable

from core.encoding import UTF8_COMPATIBLE, charset_reader, declared_encoding
from core.exceptions import DecodeError
from models.records import (
    Channel,
    DataPoint,
    Device,
    DeviceType,
    Function,
    MasterValue,
    Program,
    ResultEntry,
    ResultEnvelope,
    Room,
    SystemVariable,
)

logger = logging.getLogger(__name__)

TRUE_VALUES = ('1', 't', 'true')
FALSE_VALUES = ('', '0', 'f', 'false')


# ===== Attribute helpers =====

def attr_str(element: ET.Element, name: str) -> str:
    return element.get(name, '')


def attr_int(element: ET.Element, name: str) -> int:
    """Integer attribute; missing or empty means 0."""
    raw = element.get(name, '').strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError:
        raise DecodeError(f"<{element.tag}> attribute {name}={raw!r} is not an integer") from None


def attr_bool(element: ET.Element, name: str) -> bool:
    """Boolean attribute; accepts true/false and 1/0, missing means False."""
    raw = element.get(name, '').strip().lower()
    if raw in TRUE_VALUES:
        return True
    if raw in FALSE_VALUES:
        return False
    raise DecodeError(f"<{element.tag}> attribute {name}={raw!r} is not a boolean")


# ===== Record parsers =====

def parse_datapoint(element: ET.Element) -> DataPoint:
    return DataPoint(
        name=attr_str(element, 'name'),
        type=attr_str(element, 'type'),
        ise_id=attr_str(element, 'ise_id'),
        value=attr_str(element, 'value'),
        value_type=attr_int(element, 'valuetype'),
        value_unit=attr_str(element, 'valueunit'),
        timestamp=attr_int(element, 'timestamp'),
    )


def parse_channel(element: ET.Element) -> Channel:
    return Channel(
        name=attr_str(element, 'name'),
        type=attr_str(element, 'type'),
        address=attr_str(element, 'address'),
        ise_id=attr_str(element, 'ise_id'),
        direction=attr_str(element, 'direction'),
        parent_type=attr_str(element, 'parent_type'),
        index=attr_int(element, 'index'),
        group_partner=attr_str(element, 'group_partner'),
        aes_available=attr_bool(element, 'aes_available'),
        transmission_mode=attr_str(element, 'transmission_mode'),
        visible=attr_bool(element, 'visible'),
        ready_config=attr_bool(element, 'ready_config'),
        operate=attr_bool(element, 'operate'),
        datapoints=tuple(parse_datapoint(dp) for dp in element.findall('datapoint')),
    )


def parse_device(element: ET.Element) -> Device:
    return Device(
        name=attr_str(element, 'name'),
        address=attr_str(element, 'address'),
        ise_id=attr_str(element, 'ise_id'),
        unreach=attr_bool(element, 'unreach'),
        config_pending=attr_bool(element, 'config'),
        device_type=attr_str(element, 'device_type'),
        interface_id=attr_str(element, 'interface_id'),
        channels=tuple(parse_channel(ch) for ch in element.findall('channel')),
        master_values=tuple(
            MasterValue(name=attr_str(mv, 'name'), value=attr_str(mv, 'value'))
            for mv in element.findall('mastervalue')
        ),
    )


def parse_program(element: ET.Element) -> Program:
    return Program(
        id=attr_str(element, 'id'),
        name=attr_str(element, 'name'),
        description=attr_str(element, 'description'),
        info=attr_str(element, 'info'),
        visible=attr_bool(element, 'visible'),
        active=attr_bool(element, 'active'),
        timestamp=attr_int(element, 'timestamp'),
    )


def parse_room(element: ET.Element) -> Room:
    return Room(
        name=attr_str(element, 'name'),
        ise_id=attr_str(element, 'ise_id'),
        channels=tuple(parse_channel(ch) for ch in element.findall('channel')),
    )


def parse_function(element: ET.Element) -> Function:
    return Function(
        name=attr_str(element, 'name'),
        ise_id=attr_str(element, 'ise_id'),
        channels=tuple(parse_channel(ch) for ch in element.findall('channel')),
    )


def parse_system_variable(element: ET.Element) -> SystemVariable:
    return SystemVariable(
        name=attr_str(element, 'name'),
        variable=attr_str(element, 'variable'),
        value=attr_str(element, 'value'),
        value_type=attr_int(element, 'valuetype'),
        ise_id=attr_str(element, 'ise_id'),
        min=attr_str(element, 'min'),
        max=attr_str(element, 'max'),
        unit=attr_str(element, 'unit'),
        type=attr_str(element, 'type'),
        subtype=attr_str(element, 'subtype'),
        logged=attr_bool(element, 'logged'),
        visible=attr_bool(element, 'visible'),
        timestamp=attr_int(element, 'timestamp'),
        value_name_0=attr_str(element, 'value_name_0'),
        value_name_1=attr_str(element, 'value_name_1'),
        value_text=attr_str(element, 'value_text'),
    )


def parse_device_type(element: ET.Element) -> DeviceType:
    return DeviceType(name=attr_str(element, 'name'), id=attr_str(element, 'id'))


def parse_result(root: ET.Element) -> ResultEnvelope:
    return ResultEnvelope(
        tag=root.tag,
        text=(root.text or '').strip(),
        entries=tuple(ResultEntry(tag=child.tag, attributes=dict(child.attrib)) for child in root),
    )


# ===== Schemas =====

@dataclass(frozen=True)
class Schema:
    """Shape of one XML-API document.

    roots: accepted root element names (empty accepts any root)
    child: tag of the repeated record element, or None for whole-document schemas
    parse: record parser for each child, or for the root when child is None
    """
    name: str
    roots: tuple[str, ...]
    child: str | None
    parse: Callable


def parse_version(root: ET.Element) -> str:
    return (root.text or '').strip()


SCHEMAS = {
    schema.name: schema for schema in (
        Schema('version', ('version',), None, parse_version),
        Schema('device_list', ('deviceList',), 'device', parse_device),
        Schema('state_list', ('stateList',), 'device', parse_device),
        Schema('state', ('state', 'stateList'), 'device', parse_device),
        Schema('master_value', ('mastervalue', 'deviceList'), 'device', parse_device),
        Schema('device_type_list', ('deviceTypes', 'deviceTypeList'), 'deviceType', parse_device_type),
        Schema('program_list', ('programList',), 'program', parse_program),
        Schema('room_list', ('roomList',), 'room', parse_room),
        Schema('function_list', ('functionList',), 'function', parse_function),
        Schema('sysvar_list', ('systemVariables',), 'systemVariable', parse_system_variable),
        Schema('result', (), None, parse_result),
    )
}


def parse_document(data: bytes) -> ET.Element:
    """Parse a UTF-8 (or declared Latin-1 family) body into an element tree.

    Raises:
        UnsupportedCharsetError: If the declaration names an unknown charset
        DecodeError: If the document is not well-formed XML
    """
    charset = declared_encoding(data)
    if charset and charset.lower() not in UTF8_COMPATIBLE:
        logger.debug("Decoding body declared as %s", charset)
        data = charset_reader(charset, data)

    try:
        return ET.fromstring(data)
    except ET.ParseError as e:
        raise DecodeError(f"failed to parse XML: {e}") from e


def decode(data: bytes, schema_name: str):
    """Decode a response body against a named schema.

    Args:
        data: Normalised response body
        schema_name: Key into SCHEMAS, chosen by the calling operation

    Returns:
        A list of records, or the single value produced by whole-document
        schemas (version string, ResultEnvelope)
    """
    schema = SCHEMAS[schema_name]
    root = parse_document(data)

    if schema.roots and root.tag not in schema.roots:
        expected = ', '.join(f"<{tag}>" for tag in schema.roots)
        raise DecodeError(f"expected root element {expected} but got <{root.tag}>")

    if schema.child is None:
        return schema.parse(root)
    return [schema.parse(element) for element in root.findall(schema.child)]

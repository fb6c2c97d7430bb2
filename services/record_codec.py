"""
Conversion between Python values and DynamoDB attribute values.

Values stored under a data key are JSON-like: str, int, float, bool, None,
lists and dicts nested to any depth. boto3's type serializer handles the
tagged wire format; floats must travel as Decimal, and numbers come back
as int when integral.
"""
import math
from decimal import Decimal
from typing import Any, Dict

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def to_dynamo_safe(value: Any) -> Any:
    """Replace floats with Decimals so TypeSerializer accepts the value."""
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            raise ValueError(f'Cannot store non-finite number: {value}')
        return Decimal(str(value))
    if isinstance(value, dict):
        return {str(k): to_dynamo_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dynamo_safe(v) for v in value]
    return value


def from_dynamo(value: Any) -> Any:
    """Undo Decimal numbers produced by TypeDeserializer."""
    if isinstance(value, Decimal):
        # Floats are written as str(float), which always has '.' or 'E'
        text = str(value)
        if '.' in text or 'E' in text.upper():
            return float(value)
        return int(value)
    if isinstance(value, dict):
        return {k: from_dynamo(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [from_dynamo(v) for v in value]
    return value


def serialize_value(value: Any) -> Dict[str, Any]:
    """Python value -> DynamoDB attribute value, e.g. 'x' -> {'S': 'x'}."""
    return _serializer.serialize(to_dynamo_safe(value))


def deserialize_value(attribute: Dict[str, Any]) -> Any:
    """DynamoDB attribute value -> Python value."""
    return from_dynamo(_deserializer.deserialize(attribute))


def build_item(
    key_attribute: str,
    main_key: str,
    data: Dict[str, Any],
    version: int = None
) -> Dict[str, Dict[str, Any]]:
    """
    Build a record item in DynamoDB format.

    Args:
        key_attribute: Name of the hash key attribute
        main_key: Main key value
        data: Data map of the record
        version: Optional version number for conditional writes

    Returns:
        Item dictionary ready for put_item
    """
    item = {
        key_attribute: {'S': main_key},
        'data': serialize_value(data),
    }
    if version is not None:
        item['version'] = {'N': str(version)}
    return item


def parse_item(item: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    """Decode every attribute of a DynamoDB item."""
    return {name: deserialize_value(attr) for name, attr in item.items()}

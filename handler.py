"""
Lambda entry point exposing the record store.

An event names the operation and its arguments:

    {"operation": "save", "main_key": "u1", "data_key": "color", "value": "blue"}

Supported operations: save, load, delete_value, delete_record and
provision_table.
"""
import json
import boto3
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple
from logger_config import get_logger
from config import Config, get_config
from services.record_store import RecordStore
from utils.decorators import lambda_handler

logger = get_logger(__name__)

OPERATIONS_NEEDING_DATA_KEY = {'save', 'load', 'delete_value'}
OPERATIONS = OPERATIONS_NEEDING_DATA_KEY | {'delete_record', 'provision_table'}

_store: Optional[RecordStore] = None


def get_aws_credentials(config: Config) -> Tuple[Optional[str], Optional[str]]:
    """
    Retrieve DynamoDB credentials from Secrets Manager with fallback
    to the configured values.

    The secret is a JSON object with aws_access_key_id and
    aws_secret_access_key. Returns (None, None) when neither source has
    credentials, in which case boto3's default chain applies.
    """
    if config.secret_name:
        try:
            secrets_client = boto3.client(
                'secretsmanager', region_name=config.aws_region
            )
            response = secrets_client.get_secret_value(
                SecretId=config.secret_name
            )
            secret_data = json.loads(response['SecretString'])

            access_key = secret_data.get('aws_access_key_id')
            secret_key = secret_data.get('aws_secret_access_key')

            if access_key and secret_key:
                logger.info(
                    f'Using DynamoDB credentials from Secrets Manager: '
                    f'{config.secret_name}'
                )
                return access_key, secret_key
            logger.warning(
                f'Secrets Manager secret {config.secret_name} is missing '
                f'access keys, falling back to configuration'
            )
        except Exception as e:
            logger.warning(
                f'Failed to retrieve credentials from Secrets Manager '
                f'({config.secret_name}): {str(e)}. '
                f'Falling back to configuration.'
            )

    if config.has_static_credentials:
        return config.aws_access_key_id, config.aws_secret_access_key

    logger.info('No static credentials configured, using default AWS chain')
    return None, None


def get_store() -> RecordStore:
    """Build the store once per Lambda container."""
    global _store
    if _store is None:
        config = get_config()
        access_key, secret_key = get_aws_credentials(config)
        config = replace(
            config,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key
        )
        _store = RecordStore.from_config(config)
    return _store


def _require(event: Dict[str, Any], field: str) -> Any:
    value = event.get(field)
    if value is None or value == '':
        raise ValueError(f'"{field}" is required for operation {event.get("operation")}')
    return value


@lambda_handler
def record_store(event, context):
    """Run one record store operation described by the event."""
    if not isinstance(event, dict):
        raise ValueError('Event must be a JSON object')

    operation = event.get('operation')
    if operation not in OPERATIONS:
        raise ValueError(
            f'Unknown operation {operation!r}; expected one of {sorted(OPERATIONS)}'
        )

    store = get_store()

    if operation == 'provision_table':
        response = store.provision_table(
            event.get('table_name'), event.get('key_name')
        )
        return {'result': {'table_status': response.get('TableDescription', {}).get('TableStatus')}}

    store.bind_main_key(_require(event, 'main_key'))

    if operation == 'delete_record':
        store.delete_record()
        return {'result': None}

    data_key = _require(event, 'data_key')
    if operation == 'save':
        if 'value' not in event:
            raise ValueError('"value" is required for operation save')
        store.save(data_key, event['value'])
        return {'result': None}
    if operation == 'load':
        return {'result': store.load(data_key)}

    store.delete_value(data_key)
    return {'result': None}

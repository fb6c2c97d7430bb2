"""
Record store: per-user key-value data kept in one DynamoDB table.

Each item is keyed by a main key (a user id) and holds a ``data`` map of
data keys to JSON-like values. Writes are read-modify-write of the whole
map. Without optimistic locking the last writer wins, so two concurrent
saves for the same main key can lose one of the updates.
"""
import functools
from enum import Enum
from typing import Any, Callable, Dict, Optional
from botocore.exceptions import ClientError, WaiterError
from config import Config
from logger_config import get_logger
from utils.decorators import store_operation
from utils.exceptions import (
    ConcurrentUpdateError,
    DatabaseError,
    DataKeyNotFoundError,
    MainKeyNotFoundError,
)
from .dynamodb_service import (
    CONDITIONAL_CHECK_FAILED,
    RESOURCE_IN_USE,
    RESOURCE_NOT_FOUND,
    DynamoDBService,
    error_code,
)
from .record_codec import build_item, parse_item

logger = get_logger(__name__)

VERSION_ATTRIBUTE = 'version'


class MissingTablePolicy(str, Enum):
    """What save/load do when the table does not exist yet."""

    # Start table creation and return {} without performing the request
    CREATE = 'create'
    # Create the table, wait for it to become active, then run the request
    WAIT = 'wait'


class RecordStore:
    """Accessor for the records of one table, bound to one main key."""

    def __init__(
        self,
        table_name: str,
        config: Optional[Config] = None,
        dynamodb_service: Optional[DynamoDBService] = None,
        main_key_attribute: Optional[str] = None,
        missing_table_policy: Optional[MissingTablePolicy] = None,
        optimistic_locking: Optional[bool] = None
    ):
        """
        Initialize record store.

        Args:
            table_name: Name of the DynamoDB table
            config: Connection and table settings; defaults apply when omitted
            dynamodb_service: Service to use instead of one built from config
            main_key_attribute: Hash key attribute name (overrides config)
            missing_table_policy: Overrides config.missing_table_policy
            optimistic_locking: Overrides config.optimistic_locking
        """
        self.table_name = table_name
        self.config = config or Config(dynamodb_table=table_name)
        self.dynamodb_service = dynamodb_service or DynamoDBService(config)
        self.main_key_attribute = (
            main_key_attribute or self.config.main_key_attribute
        )
        self.missing_table_policy = MissingTablePolicy(
            missing_table_policy or self.config.missing_table_policy
        )
        self.optimistic_locking = (
            self.config.optimistic_locking
            if optimistic_locking is None else optimistic_locking
        )
        self.main_key: Optional[str] = None

    @classmethod
    def from_config(cls, config: Config) -> "RecordStore":
        return cls(config.dynamodb_table, config=config)

    def bind_main_key(self, main_key: str) -> "RecordStore":
        """Set the main key used by subsequent operations."""
        self.main_key = main_key
        return self

    @store_operation
    def save(self, data_key: str, value: Any) -> Dict[str, Any]:
        """
        Store value under data_key in the bound main key's record.

        The record is created if it does not exist.

        Returns:
            The put_item response, or {} when the table was missing and
            the CREATE policy only started provisioning it

        Raises:
            ConcurrentUpdateError: With optimistic locking, if the record
                changed between read and write
            ClientError: Any other DynamoDB failure
        """
        return self._provisioning_on_missing_table(
            functools.partial(self._save, data_key, value)
        )

    @store_operation
    def load(self, data_key: str) -> Any:
        """
        Return the value stored under data_key.

        Returns {} when the table was missing and the CREATE policy only
        started provisioning it.

        Raises:
            MainKeyNotFoundError: No record for the bound main key
            DataKeyNotFoundError: The record has no such data key
            ClientError: Any other DynamoDB failure
        """
        return self._provisioning_on_missing_table(
            functools.partial(self._load, data_key)
        )

    @store_operation
    def delete_record(self) -> Dict[str, Any]:
        """Delete the whole record; deleting a missing record succeeds."""
        return self.dynamodb_service.delete_item(self.table_name, self._key())

    @store_operation
    def delete_value(self, data_key: str) -> Dict[str, Any]:
        """
        Remove data_key from the record, leaving other keys untouched.

        A missing table is reported as the DynamoDB error; this path never
        provisions.

        Raises:
            MainKeyNotFoundError: No record for the bound main key
            DataKeyNotFoundError: The record has no such data key
            ConcurrentUpdateError: With optimistic locking, on a lost race
        """
        record = self._read_record()
        if record is None:
            raise MainKeyNotFoundError(self.main_key)
        data = dict(record['data'])
        if data_key not in data:
            raise DataKeyNotFoundError(self.main_key, data_key)
        del data[data_key]
        return self._write(data, record, data_key)

    def provision_table(
        self,
        table_name: Optional[str] = None,
        key_name: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Create the table with a single string hash key.

        Does not wait for the table to become active.

        Args:
            table_name: Table to create (defaults to the bound table)
            key_name: Hash key attribute (defaults to main_key_attribute)

        Returns:
            The create_table response

        Raises:
            ClientError: If creation fails, including ResourceInUseException
                when the table already exists
        """
        return self.dynamodb_service.create_table(
            table_name or self.table_name,
            key_name or self.main_key_attribute,
            read_capacity_units=self.config.read_capacity_units,
            write_capacity_units=self.config.write_capacity_units
        )

    def _key(self) -> Dict[str, Dict[str, str]]:
        if self.main_key is None:
            raise ValueError('Main key is not bound; call bind_main_key first')
        return {self.main_key_attribute: {'S': self.main_key}}

    def _read_record(self) -> Optional[Dict[str, Any]]:
        item = self.dynamodb_service.get_item(
            self.table_name, self._key(), consistent_read=True
        )
        if item is None:
            return None
        record = parse_item(item)
        data = record.get('data', {})
        if not isinstance(data, dict):
            raise DatabaseError(
                f'Record for main key "{self.main_key}" has a non-map data attribute',
                main_key=self.main_key,
                table_name=self.table_name
            )
        return {'data': data, VERSION_ATTRIBUTE: record.get(VERSION_ATTRIBUTE)}

    def _save(self, data_key: str, value: Any) -> Dict[str, Any]:
        record = self._read_record()
        data = dict(record['data']) if record else {}
        data[data_key] = value
        return self._write(data, record, data_key)

    def _load(self, data_key: str) -> Any:
        record = self._read_record()
        if record is None:
            raise MainKeyNotFoundError(self.main_key)
        if data_key not in record['data']:
            raise DataKeyNotFoundError(self.main_key, data_key)
        return record['data'][data_key]

    def _write(
        self,
        data: Dict[str, Any],
        record: Optional[Dict[str, Any]],
        data_key: Optional[str] = None
    ) -> Dict[str, Any]:
        if not self.optimistic_locking:
            return self.dynamodb_service.put_item(
                self.table_name,
                build_item(self.main_key_attribute, self.main_key, data)
            )

        current = record.get(VERSION_ATTRIBUTE) if record else None
        values = None
        if record is None:
            condition = 'attribute_not_exists(#pk)'
            names = {'#pk': self.main_key_attribute}
        elif current is None:
            condition = 'attribute_not_exists(#version)'
            names = {'#version': VERSION_ATTRIBUTE}
        else:
            condition = '#version = :expected'
            names = {'#version': VERSION_ATTRIBUTE}
            values = {':expected': {'N': str(current)}}

        item = build_item(
            self.main_key_attribute, self.main_key, data,
            version=(current or 0) + 1
        )
        try:
            return self.dynamodb_service.put_item(
                self.table_name,
                item,
                condition_expression=condition,
                expression_attribute_names=names,
                expression_attribute_values=values
            )
        except ClientError as e:
            if error_code(e) == CONDITIONAL_CHECK_FAILED:
                raise ConcurrentUpdateError(self.main_key, data_key) from e
            raise

    def _provisioning_on_missing_table(self, operation: Callable[[], Any]) -> Any:
        try:
            return operation()
        except ClientError as e:
            if error_code(e) != RESOURCE_NOT_FOUND:
                raise

        logger.info(f'Table {self.table_name} not found, provisioning it')
        try:
            self.provision_table()
        except ClientError as e:
            if error_code(e) != RESOURCE_IN_USE:
                raise
            logger.info(f'Table {self.table_name} is already being created')

        if self.missing_table_policy is not MissingTablePolicy.WAIT:
            return {}

        try:
            self.dynamodb_service.wait_until_active(self.table_name)
        except WaiterError as e:
            raise DatabaseError(
                f'Table {self.table_name} did not become active: {e}',
                main_key=self.main_key,
                table_name=self.table_name
            ) from e
        return operation()

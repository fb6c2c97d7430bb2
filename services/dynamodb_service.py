"""
DynamoDB service for table and item operations.
"""
import boto3
from typing import Dict, Any, Optional, TYPE_CHECKING
from botocore.exceptions import ClientError
from config import Config
from logger_config import get_logger

if TYPE_CHECKING:
    from mypy_boto3_dynamodb import DynamoDBClient
else:
    DynamoDBClient = Any

logger = get_logger(__name__)

RESOURCE_NOT_FOUND = 'ResourceNotFoundException'
RESOURCE_IN_USE = 'ResourceInUseException'
CONDITIONAL_CHECK_FAILED = 'ConditionalCheckFailedException'


def error_code(error: ClientError) -> str:
    """Extract the service error code from a ClientError."""
    return error.response.get('Error', {}).get('Code', '')


class DynamoDBService:
    """Service for DynamoDB operations."""

    def __init__(
        self,
        config: Optional[Config] = None,
        client: Optional[DynamoDBClient] = None
    ) -> None:
        """
        Initialize DynamoDB service.

        Args:
            config: Connection settings (region, credentials, endpoint).
                Without one, boto3's ambient configuration is used.
            client: Pre-built client, mainly for tests
        """
        self.config = config
        self._client: Optional[DynamoDBClient] = client

    @property
    def client(self) -> DynamoDBClient:
        """Lazy initialization of DynamoDB client."""
        if self._client is None:
            self._client = boto3.client('dynamodb', **self._client_kwargs())
        return self._client

    def _client_kwargs(self) -> Dict[str, Any]:
        if self.config is None:
            return {}
        kwargs: Dict[str, Any] = {'region_name': self.config.aws_region}
        if self.config.endpoint_url:
            kwargs['endpoint_url'] = self.config.endpoint_url
        if self.config.has_static_credentials:
            kwargs['aws_access_key_id'] = self.config.aws_access_key_id
            kwargs['aws_secret_access_key'] = self.config.aws_secret_access_key
        return kwargs

    def get_item(
        self,
        table_name: str,
        key: Dict[str, Dict[str, str]],
        consistent_read: bool = False
    ) -> Optional[Dict[str, Any]]:
        """
        Get an item from DynamoDB table.

        Args:
            table_name: Name of the DynamoDB table
            key: Dictionary with attribute names and values in DynamoDB format
            consistent_read: Request a strongly consistent read

        Returns:
            Item dictionary if found, None otherwise

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            response = self.client.get_item(
                TableName=table_name,
                Key=key,
                ConsistentRead=consistent_read
            )
            return response.get('Item')
        except ClientError as e:
            if error_code(e) == RESOURCE_NOT_FOUND:
                logger.warning(f'DynamoDB table {table_name} not found')
            else:
                logger.error(f'DynamoDB get_item failed for table {table_name}: {str(e)}')
            raise

    def put_item(
        self,
        table_name: str,
        item: Dict[str, Dict[str, Any]],
        condition_expression: Optional[str] = None,
        expression_attribute_names: Optional[Dict[str, str]] = None,
        expression_attribute_values: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """
        Put an item into DynamoDB table.

        Args:
            table_name: Name of the DynamoDB table
            item: Item dictionary in DynamoDB format
            condition_expression: Optional condition for the write
            expression_attribute_names: Placeholders used by the condition
            expression_attribute_values: Values used by the condition

        Returns:
            Response from DynamoDB

        Raises:
            ClientError: If DynamoDB operation fails
        """
        kwargs: Dict[str, Any] = {'TableName': table_name, 'Item': item}
        if condition_expression:
            kwargs['ConditionExpression'] = condition_expression
        if expression_attribute_names:
            kwargs['ExpressionAttributeNames'] = expression_attribute_names
        if expression_attribute_values:
            kwargs['ExpressionAttributeValues'] = expression_attribute_values
        try:
            response = self.client.put_item(**kwargs)
            logger.info(f'Successfully put item to DynamoDB table {table_name}')
            return response
        except ClientError as e:
            if error_code(e) == CONDITIONAL_CHECK_FAILED:
                logger.warning(f'DynamoDB conditional put rejected for table {table_name}')
            else:
                logger.error(f'DynamoDB put_item failed for table {table_name}: {str(e)}')
            raise

    def delete_item(
        self,
        table_name: str,
        key: Dict[str, Dict[str, str]]
    ) -> Dict[str, Any]:
        """
        Delete an item from DynamoDB table.

        Deleting a key that does not exist succeeds.

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            response = self.client.delete_item(TableName=table_name, Key=key)
            logger.info(f'Successfully deleted item from DynamoDB table {table_name}')
            return response
        except ClientError as e:
            logger.error(f'DynamoDB delete_item failed for table {table_name}: {str(e)}')
            raise

    def create_table(
        self,
        table_name: str,
        key_name: str,
        read_capacity_units: int = 5,
        write_capacity_units: int = 5
    ) -> Dict[str, Any]:
        """
        Create a table keyed by a single string hash key.

        Returns as soon as DynamoDB accepts the request; the table is
        usually still CREATING at that point.

        Raises:
            ClientError: If DynamoDB operation fails
        """
        try:
            response = self.client.create_table(
                TableName=table_name,
                AttributeDefinitions=[
                    {'AttributeName': key_name, 'AttributeType': 'S'}
                ],
                KeySchema=[
                    {'AttributeName': key_name, 'KeyType': 'HASH'}
                ],
                ProvisionedThroughput={
                    'ReadCapacityUnits': read_capacity_units,
                    'WriteCapacityUnits': write_capacity_units
                }
            )
            logger.info(f'Table {table_name} created.')
            return response
        except ClientError as e:
            logger.error(f'Error while creating DynamoDB table {table_name}: {str(e)}')
            raise

    def wait_until_active(
        self,
        table_name: str,
        delay: int = 5,
        max_attempts: int = 25
    ) -> None:
        """
        Block until the table exists and is ACTIVE.

        Raises:
            WaiterError: If the table is not active after max_attempts polls
        """
        waiter = self.client.get_waiter('table_exists')
        waiter.wait(
            TableName=table_name,
            WaiterConfig={'Delay': delay, 'MaxAttempts': max_attempts}
        )
        logger.info(f'Table {table_name} is active')

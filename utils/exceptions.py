"""
Error kinds raised by the record store.

Every kind carries a stable string ``code`` so callers (and the Lambda
handler) can branch on it without importing the classes.
"""
from typing import Optional

ERR_MAIN_KEY_NOT_FOUND = 'ERR_MAIN_KEY_NOT_FOUND'
ERR_DATA_KEY_NOT_FOUND = 'ERR_DATA_KEY_NOT_FOUND'
ERR_AWS = 'ERR_AWS'
ERR_CONCURRENT_UPDATE = 'ERR_CONCURRENT_UPDATE'


class RecordStoreError(Exception):
    """Base class for errors detected by the record store itself."""

    code: str = ''

    def __init__(
        self,
        message: str,
        main_key: Optional[str] = None,
        data_key: Optional[str] = None
    ):
        """
        Initialize record store error.

        Args:
            message: Error message
            main_key: Bound main key when the error occurred
            data_key: Data key involved, if any
        """
        super().__init__(message)
        self.message = message
        self.main_key = main_key
        self.data_key = data_key

    def to_dict(self) -> dict:
        return {
            'type': type(self).__name__,
            'code': self.code,
            'message': self.message,
        }


class MainKeyNotFoundError(RecordStoreError):
    """No record exists for the bound main key."""

    code = ERR_MAIN_KEY_NOT_FOUND

    def __init__(self, main_key: Optional[str]):
        super().__init__(
            f'Mainkey "{main_key}" not found in database',
            main_key=main_key
        )


class DataKeyNotFoundError(RecordStoreError):
    """The record exists but has no value under the data key."""

    code = ERR_DATA_KEY_NOT_FOUND

    def __init__(self, main_key: Optional[str], data_key: str):
        super().__init__(
            f'Data key "{data_key}" not found for main key "{main_key}"',
            main_key=main_key,
            data_key=data_key
        )


class DatabaseError(RecordStoreError):
    """
    DynamoDB failed in a way the store detected itself.

    Plain ``botocore`` client errors are not wrapped in this; they reach the
    caller unchanged.
    """

    code = ERR_AWS

    def __init__(
        self,
        message: str,
        main_key: Optional[str] = None,
        table_name: Optional[str] = None
    ):
        super().__init__(message, main_key=main_key)
        self.table_name = table_name


class ConcurrentUpdateError(RecordStoreError):
    """Another writer changed the record between our read and write."""

    code = ERR_CONCURRENT_UPDATE

    def __init__(self, main_key: Optional[str], data_key: Optional[str] = None):
        super().__init__(
            f'Record for main key "{main_key}" was modified concurrently',
            main_key=main_key,
            data_key=data_key
        )

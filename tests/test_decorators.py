"""
Unit tests for handler and store operation decorators.
"""
import pytest
from botocore.exceptions import ClientError
from utils.decorators import lambda_handler, store_operation
from utils.exceptions import DataKeyNotFoundError


class FakeStore:
    table_name = 't'
    main_key = 'u1'

    @store_operation
    def ok(self, value):
        return value

    @store_operation
    def missing(self):
        raise DataKeyNotFoundError(self.main_key, 'k')


class TestStoreOperation:

    def test_returns_result(self):
        assert FakeStore().ok(41) == 41

    def test_reraises_store_errors(self):
        with pytest.raises(DataKeyNotFoundError):
            FakeStore().missing()

    def test_keeps_name(self):
        assert FakeStore.ok.__name__ == 'ok'


class TestLambdaHandler:

    def test_wraps_plain_result(self):
        @lambda_handler
        def handle(event, context):
            return [1, 2]

        response = handle({}, None)
        assert response['result'] == [1, 2]
        assert response['metadata']['correlation_id']

    def test_keeps_result_dict(self):
        @lambda_handler
        def handle(event, context):
            return {'result': 'x'}

        assert handle({}, None)['result'] == 'x'

    def test_store_error_response(self):
        @lambda_handler
        def handle(event, context):
            raise DataKeyNotFoundError('u1', 'k')

        error = handle({}, None)['error']
        assert error['code'] == 'ERR_DATA_KEY_NOT_FOUND'
        assert error['message'] == 'Data key "k" not found for main key "u1"'

    def test_client_error_response(self):
        @lambda_handler
        def handle(event, context):
            raise ClientError(
                {'Error': {'Code': 'ThrottlingException', 'Message': 'slow down'}},
                'GetItem'
            )

        error = handle({}, None)['error']
        assert error['type'] == 'ClientError'
        assert error['code'] == 'ThrottlingException'

    def test_unexpected_error_response(self):
        @lambda_handler
        def handle(event, context):
            raise RuntimeError('boom')

        response = handle({}, None)
        assert response['error']['type'] == 'RuntimeError'
        assert response['metadata']['handler'] == 'handle'

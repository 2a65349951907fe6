from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.test import APIRequestFactory
from rest_framework.views import APIView

from nikahFirst.exceptions import BadRequest, Conflict, _first_message, api_exception_handler


class Exploding(APIView):
    authentication_classes = []
    permission_classes = []

    def get(self, request):
        raise RuntimeError("boom")


class Refusing(APIView):
    authentication_classes = []
    permission_classes = []

    def get(self, request):
        raise Conflict("Idempotency key already used by another user")


class TestFirstMessage:
    def test_detail_string(self):
        assert _first_message({'detail': 'Not found.'}) == 'Not found.'

    def test_field_errors_keep_field_name(self):
        assert _first_message({'email': ['This email is already registered.']}) == \
            'email: This email is already registered.'

    def test_non_field_errors_drop_the_key(self):
        assert _first_message({'non_field_errors': ['Invalid email or password.']}) == 'Invalid email or password.'

    def test_lists(self):
        assert _first_message(['first', 'second']) == 'first'
        assert _first_message([]) == ''


class TestExceptionHandler:
    def test_api_exception_is_flattened(self):
        response = api_exception_handler(BadRequest("Rejection reason is required"), {})
        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data == {'error': 'Rejection reason is required'}

    def test_validation_error_is_flattened(self):
        response = api_exception_handler(ValidationError({'price': ['Ensure this value is greater than or equal to 0.']}), {})
        assert response.status_code == 400
        assert response.data == {'error': 'price: Ensure this value is greater than or equal to 0.'}

    def test_conflict_through_a_view(self):
        response = Refusing.as_view()(APIRequestFactory().get('/'))
        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.data == {'error': 'Idempotency key already used by another user'}

    def test_unhandled_error_becomes_500(self, caplog):
        response = Exploding.as_view()(APIRequestFactory().get('/'))
        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.data == {'error': 'Internal server error'}
        assert 'Unhandled error in Exploding' in caplog.text

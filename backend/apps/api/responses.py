# apps/api/responses.py

from rest_framework import status
from rest_framework.response import Response

from apps.common.results import OperationResult


STATUS_BY_ERROR = {
    "validation_error": status.HTTP_400_BAD_REQUEST,
    "invalid_reference": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "duplicate_email": status.HTTP_409_CONFLICT,
    "transition_error": status.HTTP_409_CONFLICT,
    "storage_error": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def failure_response(result: OperationResult) -> Response:
    code = STATUS_BY_ERROR.get(result.error, status.HTTP_400_BAD_REQUEST)
    return Response(result.to_dict(), status=code)


def result_response(
    result: OperationResult,
    serializer_class=None,
    success_status: int = status.HTTP_200_OK,
    many: bool = False,
) -> Response:
    """Render an operation result: serialized data on success, error body otherwise."""
    if not result.success:
        return failure_response(result)
    if success_status == status.HTTP_204_NO_CONTENT:
        return Response(status=success_status)
    if serializer_class is None:
        return Response(result.to_dict(), status=success_status)
    return Response(serializer_class(result.data, many=many).data, status=success_status)

from rest_framework.response import Response
from rest_framework import status


def api_error(message: str, status_code=status.HTTP_400_BAD_REQUEST, **extra):
    """
    Small helper to standardize domain rejections across the API.
    Always returns: {"message": "<message>", ...extra} with the given status code.
    """
    return Response({"message": message, **extra}, status=status_code)

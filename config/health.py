from common.db import Session, translate_db_errors
from common.errors import DbDownError
from common.exceptions import service_error_response
from django.db import connections
from drf_spectacular.utils import extend_schema
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.response import Response


@extend_schema(tags=["Health Endpoint"], summary="Health check")
@api_view(["GET"])
@authentication_classes([])
@permission_classes([])
@throttle_classes([])
def health(request):
    """Report ok only when the default database answers."""

    session = Session.autonomous()
    try:
        with translate_db_errors("health"):
            with connections[session.using].cursor() as cursor:
                cursor.execute("SELECT 1")
    except DbDownError as exc:
        return service_error_response(exc)
    return Response({"status": "ok", "database": "ok"})

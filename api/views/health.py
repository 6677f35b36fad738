import logging

from django.db import connections
from rest_framework.decorators import api_view
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(['GET'])
def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        return Response({'ok': True, 'db': bool(row and row[0] == 1)})
    except Exception as e:
        logger.exception("Health check failed")
        return Response({'ok': False, 'error': str(e)}, status=503)

from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..principal import principal_for
from ..services import rewards as svc


@api_view(['GET'])
def rewards_dashboard(request):
    return Response(svc.dashboard(principal_for(request)))


@api_view(['GET'])
def rewards_achievements(request):
    return Response(svc.achievements(principal_for(request)))

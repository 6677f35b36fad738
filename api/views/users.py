from rest_framework.decorators import api_view
from rest_framework.response import Response

from ..dto import serialize_user
from ..serializers.auth import ProfileUpdateSerializer

FIELD_MAP = {'firstName': 'first_name', 'lastName': 'last_name', 'imageUrl': 'image_url'}


@api_view(['GET', 'PUT'])
def current_user(request):
    """Read or update the caller's own profile.  Roles are never writable here."""
    user = request.user
    if request.method == 'PUT':
        s = ProfileUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        changed = []
        for key, attr in FIELD_MAP.items():
            if key in s.validated_data:
                setattr(user, attr, s.validated_data[key])
                changed.append(attr)
        if changed:
            user.save(update_fields=changed)
    return Response(serialize_user(user))

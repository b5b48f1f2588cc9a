"""
Base Views.

Common view mixins and base classes.
"""

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response


class MultiSerializerViewMixin:
    """
    Pick the serializer per action.

    Override `serializer_classes` dict in subclass:
    serializer_classes = {
        'list': ListSerializer,
        'retrieve': DetailSerializer,
        'default': DetailSerializer,
    }
    """

    def get_serializer_class(self):
        serializer_classes = getattr(self, 'serializer_classes', {})
        return serializer_classes.get(
            self.action,
            serializer_classes.get('default', super().get_serializer_class())
        )


class HistoryViewMixin:
    """
    Mixin for accessing object history.
    """

    history_limit = 50

    @action(detail=True, methods=['get'])
    def history(self, request, pk=None):
        """Get object history."""
        obj = self.get_object()

        if not hasattr(obj, 'history'):
            return Response(
                {'error': 'History is not available for this object'},
                status=status.HTTP_400_BAD_REQUEST
            )

        history = obj.history.all()[:self.history_limit]
        data = [{
            'id': h.history_id,
            'date': h.history_date,
            'user': str(h.history_user) if h.history_user else None,
            'type': h.history_type,
            'changes': h.history_change_reason,
        } for h in history]

        return Response(data)

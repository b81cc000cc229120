import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core_backend.exceptions import ValidationError
from orders.serializers import KitchenQueueItemSerializer
from .serializers import KitchenCompileSettingsSerializer, KitchenTimerSerializer, SaveKitchenTimerSerializer
from .services import KitchenCompileSettingsService, KitchenScheduler, KitchenTimerService

logger = logging.getLogger(__name__)


def _ids_from(request):
    ids = request.data.get('ids') if hasattr(request.data, 'get') else None
    if ids is None:
        raise ValidationError("Missing ids")
    return ids


@api_view(['POST'])
@permission_classes([AllowAny])
def update_item_status(request):
    """
    Advance kitchen items.

    Body:
    - ids: list of order item ids
    - status: new | preparing | ready | delivered

    Items already at or past the requested status are not moved back.
    """
    ids = _ids_from(request)
    new_status = request.data.get('status')
    if not new_status:
        raise ValidationError("Missing status")

    changed = KitchenScheduler.set_kitchen_status(ids, new_status)
    return Response({'updated': changed, 'status': new_status}, status=status.HTTP_200_OK)


@api_view(['POST'])
@permission_classes([AllowAny])
def reset_items(request):
    """Put items back to "new". Administrative correction only."""
    changed = KitchenScheduler.reset_items(_ids_from(request))
    return Response({'reset': changed}, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([AllowAny])
def kitchen_queue(request):
    items = KitchenScheduler.kitchen_queue()
    return Response(KitchenQueueItemSerializer(items, many=True).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def preparing_items(request):
    return Response({'ids': KitchenScheduler.preparing_item_ids()})


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def kitchen_timers(request):
    """
    GET: every timer, oldest first.
    POST: save a timer; with an id the stored timer is overwritten.
    """
    if request.method == 'GET':
        return Response(KitchenTimerSerializer(KitchenTimerService.list_timers(), many=True).data)

    serializer = SaveKitchenTimerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    timer = KitchenTimerService.save_timer(
        name=data['name'],
        seconds_left=data['seconds_left'],
        total_seconds=data['total_seconds'],
        running=data['running'],
        timer_id=data.get('id'),
    )
    created = data.get('id') is None
    return Response(
        KitchenTimerSerializer(timer).data,
        status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
    )


@api_view(['DELETE'])
@permission_classes([AllowAny])
def delete_kitchen_timer(request, timer_id):
    deleted = KitchenTimerService.delete_timer(timer_id)
    return Response({'deleted': deleted}, status=status.HTTP_200_OK)


@api_view(['GET', 'POST'])
@permission_classes([AllowAny])
def compile_settings(request):
    """Categories, product ids and ingredients the kitchen screen leaves out."""
    if request.method == 'GET':
        return Response(KitchenCompileSettingsSerializer(KitchenCompileSettingsService.get_settings()).data)

    serializer = KitchenCompileSettingsSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    settings = KitchenCompileSettingsService.update_settings(**serializer.validated_data)
    return Response(KitchenCompileSettingsSerializer(settings).data)

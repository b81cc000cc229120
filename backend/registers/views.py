from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import CashRegisterLogSerializer, RegisterEntrySerializer, RegisterStatusSerializer
from .services import RegisterService


class RegisterStatusView(APIView):
    permission_classes = [AllowAny]

    def get(self, request):
        return Response(RegisterStatusSerializer(RegisterService.status()).data)


class OpenRegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = RegisterService.open_register(**serializer.validated_data)
        return Response(CashRegisterLogSerializer(entry).data, status=status.HTTP_201_CREATED)


class CloseRegisterView(APIView):
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = RegisterService.close_register(**serializer.validated_data)
        return Response(CashRegisterLogSerializer(entry).data, status=status.HTTP_201_CREATED)
